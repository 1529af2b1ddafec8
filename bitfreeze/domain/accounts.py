import logging
from time import time

from bitfreeze.errors import InsufficientFunds, ValidationError

log = logging.getLogger("account")


class FridgeHolding:
    def __init__(
        self,
        fridge_id,
        name,
        price: int,
        daily_earn: int,
        bought_at: int = None,
        start_time: int = None,  # offer fridges only
        duration_hours: int = None,  # offer fridges only
        paid_out: bool = False,
        id=None,
    ):
        self.id = id
        self.fridge_id = fridge_id
        self.name = name
        self.price = price
        self.daily_earn = daily_earn
        self.bought_at = bought_at if bought_at is not None else int(time())
        self.start_time = start_time
        self.duration_hours = duration_hours
        self.paid_out = paid_out

    def is_offer(self) -> bool:
        return self.start_time is not None and bool(self.duration_hours)

    def payout_due_at(self):
        if not self.is_offer():
            return None
        return self.start_time + self.duration_hours * 3600

    def to_dict(self) -> dict:
        return {
            "id": self.fridge_id,
            "name": self.name,
            "price": self.price,
            "dailyEarn": self.daily_earn,
            "boughtAt": self.bought_at,
            "startTime": self.start_time,
            "durationHours": self.duration_hours,
            "paidOut": self.paid_out,
        }


class Account:
    def __init__(
        self,
        email,
        password_hash=None,
        phone=None,
        balance: int = 0,
        earning: int = 0,
        fridges=None,
        referral_code=None,
        referred_by=None,
        last_deposit_attempt=None,
        last_withdrawal_attempt=None,
        created_at=None,
    ):
        self.email = email
        self.password_hash = password_hash
        self.phone = phone
        self.balance = balance
        self.earning = earning
        self.fridges: list[FridgeHolding] = list(fridges or [])
        self.referral_code = referral_code
        self.referred_by = referred_by
        self.last_deposit_attempt = last_deposit_attempt
        self.last_withdrawal_attempt = last_withdrawal_attempt
        self.created_at = created_at if created_at is not None else int(time())

    @staticmethod
    def _check_amount(amount):
        if not isinstance(amount, int) or isinstance(amount, bool) or amount < 0:
            raise ValidationError(f"Invalid amount: {amount!r}")

    def credit_balance(self, amount: int) -> None:
        self._check_amount(amount)
        self.balance += amount

    def debit_balance(self, amount: int) -> None:
        self._check_amount(amount)
        if self.balance < amount:
            log.info(f"Rejecting balance debit of KES {amount} for {self.email}; balance is KES {self.balance}")
            raise InsufficientFunds("Insufficient balance")
        self.balance -= amount

    def credit_earning(self, amount: int) -> None:
        self._check_amount(amount)
        self.earning += amount

    def debit_earning(self, amount: int) -> None:
        self._check_amount(amount)
        if self.earning < amount:
            log.info(f"Rejecting earning debit of KES {amount} for {self.email}; earning is KES {self.earning}")
            raise InsufficientFunds("Insufficient earnings")
        self.earning -= amount

    def add_fridge(self, holding: FridgeHolding) -> None:
        self.fridges.append(holding)

    def to_dict(self) -> dict:
        # Never expose the password hash
        return {
            "email": self.email,
            "phone": self.phone,
            "balance": self.balance,
            "earning": self.earning,
            "fridges": [f.to_dict() for f in self.fridges],
            "refCode": self.referral_code,
            "referredBy": self.referred_by,
            "createdAt": self.created_at,
        }
