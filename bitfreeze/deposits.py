"""
Deposit lifecycle.

    request_deposit  -> pending record, optional STK push (or immediate
                        confirmation when M-PESA simulation is enabled)
    confirm_deposit  -> pending -> confirmed, credits balance and referrer
    fail_deposit     -> pending -> failed
    handle_callback  -> gateway result routed to confirm/fail by reference

Confirmed and failed are terminal; touching a terminal record raises
AlreadyProcessed and changes nothing.
"""

import logging
from time import time

from flask import current_app

from bitfreeze.domain.accounts import Account
from bitfreeze.domain.gateway import DarajaGateway
from bitfreeze.domain.referrals import reward_for
from bitfreeze.domain.settings import SettingKey
from bitfreeze.domain.transactions import Deposit, DepositStatus
from bitfreeze.errors import AlreadyProcessed, DuplicatePending, GatewayUnavailable, ValidationError
from bitfreeze.extensions import db
from bitfreeze.models.account_repository import SqlAlchemyAccountRepository
from bitfreeze.models.setting_repository import SqlAlchemySettingRepository
from bitfreeze.models.transaction_repository import SqlAlchemyDepositRepository
from bitfreeze.utils.account_utils import clean_phone, make_id, parse_amount
from bitfreeze.utils.locks import locked_transaction

log = logging.getLogger("deposits")

account_repository = SqlAlchemyAccountRepository(db)
deposit_repository = SqlAlchemyDepositRepository(db)
settings_repository = SqlAlchemySettingRepository(db)


def get_gateway() -> DarajaGateway:
    return DarajaGateway.from_config(current_app.config)


def request_deposit(email: str, amount, phone) -> Deposit:
    amount = parse_amount(amount)
    phone = clean_phone(phone)
    if not phone:
        raise ValidationError("Phone required")

    now = int(time())
    cooldown = settings_repository.get_int(SettingKey.REQUEST_COOLDOWN_HOURS) * 3600

    with locked_transaction(email):
        account = account_repository.get(email, for_update=True)
        if deposit_repository.get_pending_since(email, now - cooldown):
            log.info(f"Rejecting deposit request from {email}; a pending deposit already exists")
            raise DuplicatePending("You already have a pending deposit")

        account.last_deposit_attempt = now
        deposit = Deposit(make_id(12), email, amount, phone, created_at=now)
        account_repository.save(account, commit=False)
        deposit_repository.save(deposit, commit=False)
    log.info(f"Recorded pending deposit {deposit.id} of KES {amount} for {email}")

    if settings_repository.get(SettingKey.SIMULATE_MPESA):
        log.info(f"M-PESA simulation enabled; confirming deposit {deposit.id} immediately")
        return confirm_deposit(deposit.id)

    gateway = get_gateway()
    if not gateway.is_configured():
        log.info(f"Payment gateway not configured; deposit {deposit.id} awaits admin confirmation")
        return deposit

    # The gateway call happens outside the account lock so a slow provider
    # never blocks other mutations of this account.
    try:
        gateway_ref = gateway.request_push(phone, amount, deposit.id)
    except GatewayUnavailable as e:
        log.error(f"STK push failed for deposit {deposit.id}; leaving it pending for manual confirmation: {e}")
        return deposit

    with locked_transaction(email):
        deposit = deposit_repository.get(deposit.id, for_update=True)
        deposit.gateway_ref = gateway_ref
        deposit_repository.save(deposit, commit=False)
    log.info(f"STK push initiated for deposit {deposit.id} (gateway reference {gateway_ref})")
    return deposit


def _referrer_for(account: Account):
    referrer = account_repository.find_by_referral_code(account.referred_by)
    if referrer is None or referrer.email == account.email:
        return None
    return referrer


def confirm_deposit(deposit_id: str) -> Deposit:
    deposit = deposit_repository.get(deposit_id)
    depositor = account_repository.get(deposit.account_email)
    referrer = _referrer_for(depositor) if depositor.referred_by else None

    with locked_transaction(depositor.email, referrer.email if referrer else None):
        # Re-read everything under the lock; the snapshot above only told us which locks to take
        deposit = deposit_repository.get(deposit_id, for_update=True)
        if not deposit.is_pending():
            log.info(f"Deposit {deposit_id} is already {deposit.status.value}; nothing to do")
            raise AlreadyProcessed(f"Deposit already {deposit.status.value}")

        depositor = account_repository.get(deposit.account_email, for_update=True)
        depositor.credit_balance(deposit.amount)
        deposit.confirm()
        account_repository.save(depositor, commit=False)
        deposit_repository.save(deposit, commit=False)

        reward = 0
        if referrer is not None:
            reward = reward_for(deposit.amount)
            if reward:
                referrer = account_repository.get(referrer.email, for_update=True)
                referrer.credit_balance(reward)
                account_repository.save(referrer, commit=False)

    log.info(f"Deposit {deposit_id} confirmed; credited KES {deposit.amount} to {depositor.email}")
    if reward:
        log.info(f"Referral reward of KES {reward} credited to {referrer.email}")
    return deposit


def fail_deposit(deposit_id: str) -> Deposit:
    deposit = deposit_repository.get(deposit_id)
    with locked_transaction(deposit.account_email):
        deposit = deposit_repository.get(deposit_id, for_update=True)
        if not deposit.is_pending():
            log.info(f"Deposit {deposit_id} is already {deposit.status.value}; ignoring failure")
            raise AlreadyProcessed(f"Deposit already {deposit.status.value}")
        deposit.fail()
        deposit_repository.save(deposit, commit=False)
    log.info(f"Deposit {deposit_id} marked failed")
    return deposit


def handle_callback(gateway_ref: str, success: bool) -> Deposit:
    if not gateway_ref:
        raise ValidationError("No checkout id in callback")
    deposit = deposit_repository.get_by_gateway_ref(gateway_ref)
    log.info(f"Gateway callback for {gateway_ref} (deposit {deposit.id}): {'success' if success else 'failure'}")
    if success:
        return confirm_deposit(deposit.id)
    return fail_deposit(deposit.id)


def list_pending() -> list[Deposit]:
    return deposit_repository.get_all(DepositStatus.PENDING)

