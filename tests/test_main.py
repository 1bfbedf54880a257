import pytest
from sqlalchemy.exc import OperationalError

from pizzastore import db, main as main_module
from pizzastore.config import Settings


@pytest.fixture
def app_settings():
    return Settings(DATABASE_URL=None, DB_HOST="localhost", DB_PASSWORD="",
                    LOG_LEVEL="WARNING", ENVIRONMENT="development")


def test_parse_args():
    args = main_module.parse_args(["pizzastore", "5432", "postgres"])

    assert args.dbname == "pizzastore"
    assert args.port == 5432
    assert args.user == "postgres"
    assert not args.migrate


def test_parse_args_rejects_bad_port():
    with pytest.raises(SystemExit):
        main_module.parse_args(["pizzastore", "not-a-port", "postgres"])


def test_unreachable_database_exits_with_error(monkeypatch, capsys, app_settings):
    def refuse(*args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    monkeypatch.setattr(db, "wait_for_connection", refuse)

    assert main_module.main(["pizzastore", "5432", "postgres"], app_settings) == 1

    captured = capsys.readouterr()
    assert "Unable to Connect to Database" in captured.err
    assert "Bye !" in captured.out
    assert db.engine is None


def test_console_runs_against_command_line_database(monkeypatch, capsys, app_settings):
    urls = []
    ran = []

    class FakeConsole:
        def __init__(self, store):
            self.store = store

        def run(self):
            ran.append(self.store)

    monkeypatch.setattr(db, "wait_for_connection", lambda *args, **kwargs: None)
    monkeypatch.setattr(main_module, "Console", FakeConsole)
    real_init = db.init_engine

    def init_engine(url):
        urls.append(url)
        return real_init("sqlite://")

    monkeypatch.setattr(db, "init_engine", init_engine)

    assert main_module.main(["shop", "6543", "clerk"], app_settings) == 0

    assert urls == ["postgresql+psycopg2://clerk@localhost:6543/shop"]
    assert len(ran) == 1
    assert capsys.readouterr().out.endswith("Bye !\n")
