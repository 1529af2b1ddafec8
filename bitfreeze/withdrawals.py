"""
Withdrawal lifecycle.

A request only records intent; earning is debited when an admin approves
it, and approval re-checks the account's earning at that moment.
"""

import logging
from datetime import datetime
from time import time
from zoneinfo import ZoneInfo

from flask import current_app

from bitfreeze.domain.settings import SettingKey
from bitfreeze.domain.transactions import Withdrawal, WithdrawalStatus
from bitfreeze.errors import AlreadyProcessed, DuplicatePending, InsufficientFunds, ValidationError
from bitfreeze.extensions import db
from bitfreeze.models.account_repository import SqlAlchemyAccountRepository
from bitfreeze.models.setting_repository import SqlAlchemySettingRepository
from bitfreeze.models.transaction_repository import (
    SqlAlchemyDepositRepository,
    SqlAlchemyWithdrawalRepository,
)
from bitfreeze.utils.account_utils import clean_phone, make_id, parse_amount
from bitfreeze.utils.locks import locked_transaction

log = logging.getLogger("withdrawals")

account_repository = SqlAlchemyAccountRepository(db)
deposit_repository = SqlAlchemyDepositRepository(db)
withdrawal_repository = SqlAlchemyWithdrawalRepository(db)
settings_repository = SqlAlchemySettingRepository(db)

DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


def payout_phone_for(account):
    """The registered phone, or the phone of the latest confirmed deposit."""
    if account.phone:
        return account.phone
    latest = deposit_repository.get_latest_confirmed(account.email)
    return latest.phone if latest is not None else None


def is_withdrawal_day(now: int) -> bool:
    zone = ZoneInfo(current_app.config.get("WITHDRAWAL_TIMEZONE") or "Africa/Nairobi")
    weekday = datetime.fromtimestamp(now, zone).weekday()
    return weekday in settings_repository.get_days(SettingKey.WITHDRAWAL_DAYS)


def allowed_days_text() -> str:
    days = sorted(settings_repository.get_days(SettingKey.WITHDRAWAL_DAYS))
    return ", ".join(DAY_NAMES[d] for d in days if 0 <= d < len(DAY_NAMES)) or "no days"


def request_withdrawal(email: str, amount, phone) -> Withdrawal:
    amount = parse_amount(amount)
    phone = clean_phone(phone)
    if not phone:
        raise ValidationError("Phone required")

    minimum = settings_repository.get_int(SettingKey.MIN_WITHDRAWAL)
    if amount < minimum:
        raise ValidationError(f"Minimum withdrawal is KES {minimum}")

    now = int(time())
    cooldown = settings_repository.get_int(SettingKey.REQUEST_COOLDOWN_HOURS) * 3600

    with locked_transaction(email):
        account = account_repository.get(email, for_update=True)

        if withdrawal_repository.get_pending_since(email, now - cooldown):
            log.info(f"Rejecting withdrawal request from {email}; a pending request already exists")
            raise DuplicatePending("You already have a pending withdrawal request")

        expected_phone = payout_phone_for(account)
        if not expected_phone:
            raise ValidationError("No phone on record for this account")
        if expected_phone != phone:
            log.info(f"Rejecting withdrawal request from {email}; phone mismatch")
            raise ValidationError("phone mismatch")

        if not is_withdrawal_day(now):
            raise ValidationError(f"Withdrawals are only allowed on {allowed_days_text()}")

        if account.earning < amount:
            raise InsufficientFunds("Insufficient earnings")

        account.last_withdrawal_attempt = now
        withdrawal = Withdrawal(make_id(12), email, amount, phone, requested_at=now)
        account_repository.save(account, commit=False)
        withdrawal_repository.save(withdrawal, commit=False)

    log.info(f"Withdrawal request {withdrawal.id} of KES {amount} created for {email}")
    return withdrawal


def approve_withdrawal(withdrawal_id: str) -> Withdrawal:
    withdrawal = withdrawal_repository.get(withdrawal_id)
    with locked_transaction(withdrawal.account_email):
        withdrawal = withdrawal_repository.get(withdrawal_id, for_update=True)
        if not withdrawal.is_pending():
            raise AlreadyProcessed("Already processed")

        account = account_repository.get(withdrawal.account_email, for_update=True)
        account.debit_earning(withdrawal.amount)
        withdrawal.approve()
        account_repository.save(account, commit=False)
        withdrawal_repository.save(withdrawal, commit=False)

    log.info(f"Withdrawal {withdrawal_id} approved; debited KES {withdrawal.amount} from {withdrawal.account_email}")
    return withdrawal


def reject_withdrawal(withdrawal_id: str, reason: str = None) -> Withdrawal:
    withdrawal = withdrawal_repository.get(withdrawal_id)
    with locked_transaction(withdrawal.account_email):
        withdrawal = withdrawal_repository.get(withdrawal_id, for_update=True)
        if not withdrawal.is_pending():
            raise AlreadyProcessed("Already processed")
        withdrawal.reject(reason)
        withdrawal_repository.save(withdrawal, commit=False)

    log.info(f"Withdrawal {withdrawal_id} rejected: {withdrawal.rejection_reason}")
    return withdrawal


def list_withdrawals(status: WithdrawalStatus = None) -> list[Withdrawal]:
    return withdrawal_repository.get_all(status)
