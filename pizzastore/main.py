"""
Console entry point: pizzastore <dbname> <port> <user>
"""
import argparse
import logging
import os
import sys
from typing import List, Optional

from sqlalchemy.exc import OperationalError

from . import db
from .config import Settings, settings
from .console import Console
from .store_gateway import RecordStore

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def run_alembic_migrations(database_url: str) -> bool:
    """
    Run Alembic migrations programmatically.

    Returns False when alembic.ini is missing or the upgrade fails.
    """
    from alembic import command
    from alembic.config import Config

    base_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    alembic_ini_path = os.path.join(base_dir, "alembic.ini")
    if not os.path.exists(alembic_ini_path):
        logger.warning("alembic.ini not found, skipping migrations")
        return False

    alembic_cfg = Config(alembic_ini_path)
    alembic_cfg.attributes["url_from_caller"] = True
    alembic_cfg.set_main_option("sqlalchemy.url", database_url.replace("%", "%%"))
    try:
        command.upgrade(alembic_cfg, "head")
    except Exception as e:
        logger.error(f"Migration error: {e}")
        return False
    logger.info("Migrations completed successfully")
    return True


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pizzastore",
        description="Pizza store order management console")
    parser.add_argument("dbname", help="database name")
    parser.add_argument("port", type=int, help="database port")
    parser.add_argument("user", help="database user")
    parser.add_argument("--migrate", action="store_true",
                        help="apply database migrations before starting")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None, app_settings: Settings = settings) -> int:
    args = parse_args(argv)
    configure_logging(app_settings.LOG_LEVEL)

    for warning in app_settings.validate_settings():
        logger.warning(warning)

    database_url = app_settings.database_url(dbname=args.dbname, port=args.port,
                                             user=args.user)
    print("Connecting to database...", end="")
    engine = db.init_engine(database_url)
    try:
        try:
            db.wait_for_connection(engine, retries=app_settings.CONNECT_RETRIES,
                                   delay=app_settings.CONNECT_RETRY_DELAY)
        except OperationalError as e:
            print()
            print(f"Error - Unable to Connect to Database: {e.orig}", file=sys.stderr)
            print("Make sure you started postgres on this machine")
            return 1
        print("Done")

        if args.migrate and not run_alembic_migrations(database_url):
            return 1

        with db.get_db() as session:
            Console(RecordStore(session)).run()
    finally:
        print("Disconnecting from database...", end="")
        db.dispose_engine()
        print("Done\n\nBye !")
    return 0


if __name__ == "__main__":
    sys.exit(main())
