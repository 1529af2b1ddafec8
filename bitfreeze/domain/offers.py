from time import time


class OfferCode:
    def __init__(self, code, amount: int, used_by=None, created_at=None):
        self.code = code
        self.amount = amount
        self.used_by: set = set(used_by or [])
        self.created_at = created_at if created_at is not None else int(time())

    def is_used_by(self, email) -> bool:
        return email in self.used_by

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "amount": self.amount,
            "usedBy": sorted(self.used_by),
            "createdAt": self.created_at,
        }
