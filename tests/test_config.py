from decimal import Decimal

import pytest

from billsplit.config import get_settings
from billsplit.logging import configure_logging, get_logger
from billsplit.models import ItemShare
from billsplit.services.weights import InvalidWeightError, validate_share_weights


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults(monkeypatch):
    monkeypatch.delenv("BILLSPLIT_MAX_SHARE_WEIGHT", raising=False)

    settings = get_settings()

    assert settings.max_share_weight == Decimal("100")


def test_max_share_weight_from_env(monkeypatch):
    monkeypatch.setenv("BILLSPLIT_MAX_SHARE_WEIGHT", "2")

    assert get_settings().max_share_weight == Decimal("2")
    with pytest.raises(InvalidWeightError):
        validate_share_weights([ItemShare(item_id="1", person_id="p1", weight=3)])


def test_configure_logging(monkeypatch):
    monkeypatch.setenv("BILLSPLIT_LOG_FORMAT", "console")
    monkeypatch.setenv("BILLSPLIT_LOG_LEVEL", "debug")

    configure_logging()
    get_logger("test").info("config.test", ok=True)
