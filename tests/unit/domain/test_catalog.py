import pytest

from bitfreeze.domain.catalog import Catalog, is_offer_class
from bitfreeze.errors import NotFound, ValidationError


def test_default_catalog():
    entries = Catalog().list()
    ids = [e.id for e in entries]
    assert ids[:10] == ["100", "200", "300", "400", "2ft", "4ft", "6ft", "8ft", "10ft", "12ft"]
    assert ids[10:] == [f"offer{n}" for n in range(1, 9)]
    assert all(e.locked for e in entries if e.is_offer())
    assert not any(e.locked for e in entries if not e.is_offer())


def test_find_fridge():
    entry = Catalog().find("2ft")
    assert entry.price == 500
    assert entry.daily_earn == 25


def test_find_unknown_fridge():
    with pytest.raises(NotFound):
        Catalog().find("99ft")


def test_list_returns_copies():
    catalog = Catalog()
    catalog.list()[0].price = 1
    assert catalog.find("100").price == 100


def test_is_offer_class():
    assert is_offer_class("offer3")
    assert not is_offer_class("4ft")


def test_unlock_offer(mocker):
    mocker.patch("bitfreeze.domain.catalog.time", return_value=1792573200)
    catalog = Catalog()

    entry = catalog.unlock("offer1", 300, 0, 24)

    assert not entry.locked
    assert entry.price == 300
    assert entry.duration_hours == 24
    assert entry.start_time == 1792573200
    assert catalog.find("offer1").to_dict()["startTime"] == 1792573200


def test_lock_offer_clears_terms():
    catalog = Catalog()
    catalog.unlock("offer2", 300, 0, 24)

    entry = catalog.lock("offer2")

    assert entry.locked
    assert entry.price == 0
    assert entry.start_time is None


def test_fixed_fridges_cannot_be_unlocked():
    with pytest.raises(ValidationError):
        Catalog().unlock("2ft", 300, 0, 24)


def test_unlock_unknown_fridge():
    with pytest.raises(NotFound):
        Catalog().unlock("offer99", 300, 0, 24)


@pytest.mark.parametrize(
    "price,daily_earn,duration",
    [(-1, 0, 24), (300, "5", 24), (300, 0, 0), (300, 0, None)],
)
def test_unlock_rejects_invalid_terms(price, daily_earn, duration):
    with pytest.raises(ValidationError):
        Catalog().unlock("offer1", price, daily_earn, duration)


def test_reset_restores_defaults():
    catalog = Catalog()
    catalog.unlock("offer1", 300, 0, 24)
    catalog.reset()
    assert catalog.find("offer1").locked
