from decimal import Decimal

import pytest

from pizzastore.errors import NotFound


def test_list_stores(store_service):
    stores = store_service.list_stores()

    assert [s.store_id for s in stores] == [1, 2, 3]
    assert [s.is_open for s in stores] == [True, True, False]


def test_get_store(store_service):
    location = store_service.get_store(2)

    assert location.city == "Riverside"
    assert location.review_score == Decimal("3.9")


def test_get_missing_store(store_service):
    with pytest.raises(NotFound):
        store_service.get_store(7)
