import copy
import logging
import threading
from time import time

from bitfreeze.errors import NotFound, ValidationError

log = logging.getLogger("catalog")

OFFER_PREFIX = "offer"


class CatalogEntry:
    def __init__(
        self,
        id,
        name,
        price: int,
        daily_earn: int,
        image=None,
        locked: bool = False,
        duration_hours: int = 0,
        start_time: int = None,
    ):
        self.id = id
        self.name = name
        self.price = price
        self.daily_earn = daily_earn
        self.image = image
        self.locked = locked
        self.duration_hours = duration_hours
        self.start_time = start_time

    def is_offer(self) -> bool:
        return is_offer_class(self.id)

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "dailyEarn": self.daily_earn,
            "image": self.image,
            "locked": self.locked,
        }
        if self.is_offer():
            data["durationHours"] = self.duration_hours
            data["startTime"] = self.start_time
        return data


def is_offer_class(fridge_id) -> bool:
    return str(fridge_id).startswith(OFFER_PREFIX)


def default_entries() -> list[CatalogEntry]:
    fixed = [
        ("100", "Earning Fridge 100", 100, 5, "/images/fridge100.jpg"),
        ("200", "Earning Fridge 200", 200, 10, "/images/fridge200.jpg"),
        ("300", "Earning Fridge 300", 300, 15, "/images/fridge300.jpg"),
        ("400", "Earning Fridge 400", 400, 20, "/images/fridge400.jpg"),
        ("2ft", "2 ft Fridge", 500, 25, "/images/fridge2ft.jpg"),
        ("4ft", "4 ft Fridge", 1000, 55, "/images/fridge4ft.jpg"),
        ("6ft", "6 ft Fridge", 2000, 100, "/images/fridge6ft.jpg"),
        ("8ft", "8 ft Fridge", 4000, 150, "/images/fridge8ft.jpg"),
        ("10ft", "10 ft Fridge", 6000, 250, "/images/fridge10ft.jpg"),
        ("12ft", "12 ft Fridge", 8000, 350, "/images/fridge12ft.jpg"),
    ]
    entries = [CatalogEntry(*row) for row in fixed]
    for n in range(1, 9):
        entries.append(
            CatalogEntry(
                f"{OFFER_PREFIX}{n}",
                f"Offer Fridge {n}",
                0,
                0,
                f"/images/offer{n}.jpg",
                locked=True,
            )
        )
    return entries


class Catalog:
    """
    Process-wide fridge table.

    Admin lock/unlock mutates the table under its own lock; readers only ever
    receive copies so nothing outside this class holds a live entry.
    """

    def __init__(self, entries=None):
        self._lock = threading.Lock()
        self._entries = {e.id: e for e in (entries if entries is not None else default_entries())}

    def list(self) -> list[CatalogEntry]:
        with self._lock:
            return [copy.copy(e) for e in self._entries.values()]

    def find(self, fridge_id) -> CatalogEntry:
        with self._lock:
            entry = self._entries.get(fridge_id)
            if entry is None:
                raise NotFound(f"Fridge '{fridge_id}' not found")
            return copy.copy(entry)

    def _get_offer(self, fridge_id) -> CatalogEntry:
        entry = self._entries.get(fridge_id)
        if entry is None:
            raise NotFound(f"Fridge '{fridge_id}' not found")
        if not entry.is_offer():
            raise ValidationError(f"Fridge '{fridge_id}' cannot be locked or unlocked")
        return entry

    def unlock(self, fridge_id, price: int, daily_earn: int, duration_hours: int) -> CatalogEntry:
        for name, value in (("price", price), ("dailyEarn", daily_earn), ("durationHours", duration_hours)):
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                raise ValidationError(f"Invalid {name}: {value!r}")
        if duration_hours == 0:
            raise ValidationError("durationHours must be greater than zero")

        with self._lock:
            entry = self._get_offer(fridge_id)
            entry.locked = False
            entry.price = price
            entry.daily_earn = daily_earn
            entry.duration_hours = duration_hours
            entry.start_time = int(time())
            log.info(f"{entry.name} unlocked for {duration_hours} hours at KES {price}")
            return copy.copy(entry)

    def lock(self, fridge_id) -> CatalogEntry:
        with self._lock:
            entry = self._get_offer(fridge_id)
            entry.locked = True
            entry.price = 0
            entry.daily_earn = 0
            entry.duration_hours = 0
            entry.start_time = None
            log.info(f"{entry.name} locked")
            return copy.copy(entry)

    def reset(self) -> None:
        with self._lock:
            self._entries = {e.id: e for e in default_entries()}


catalog = Catalog()
