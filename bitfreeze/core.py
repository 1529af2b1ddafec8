"""
Daily Accrual Process Overview:

SECTION 1: RUN GUARD
    - Read the persisted last run timestamp.
    - Skip the run entirely if the previous one finished inside the guard window.

SECTION 2: PER-ACCOUNT ACCRUAL
    - For each account, under its own lock and transaction:
         (a) ORDINARY FRIDGES: add the holding's daily earn.
         (b) OFFER FRIDGES: add the holding's price once its payout window has
             elapsed, then flag the holding as paid so it never pays again.
    - Credit the total to the account's earning.
    - A failure on one account is logged and the loop moves on.

SECTION 3: RECORD RUN
    - Persist the run timestamp for the next guard check.
"""

import logging
from time import time

from bitfreeze.domain.accounts import Account
from bitfreeze.domain.catalog import is_offer_class
from bitfreeze.domain.settings import Setting, SettingKey
from bitfreeze.extensions import db, scheduler
from bitfreeze.models.account_repository import SqlAlchemyAccountRepository
from bitfreeze.models.setting_repository import SqlAlchemySettingRepository
from bitfreeze.utils.locks import locked_transaction

log = logging.getLogger("accrual")
account_repository = SqlAlchemyAccountRepository(db)
settings_repository = SqlAlchemySettingRepository(db)


def compute_credit(account: Account, now: int) -> int:
    """Total credit for one run; marks offer holdings paid as a side effect."""
    credit = 0
    for holding in account.fridges:
        if is_offer_class(holding.fridge_id):
            due_at = holding.payout_due_at()
            if due_at is not None and not holding.paid_out and now >= due_at:
                credit += holding.price
                holding.paid_out = True
        else:
            credit += holding.daily_earn or 0
    return credit


def accrue_account(email: str, now: int) -> int:
    with locked_transaction(email):
        account = account_repository.get(email, for_update=True)
        credit = compute_credit(account, now)
        if credit > 0:
            account.credit_earning(credit)
            account_repository.save(account, commit=False)
    return credit


def run_daily_accrual(now: int = None):
    """
    Credit every account's earning for one day.

    Returns a summary dict, or None when the run was skipped by the guard.
    """
    now = int(time()) if now is None else now

    # --------------------------------------------------------------------
    # SECTION 1: RUN GUARD
    # --------------------------------------------------------------------
    last_run = settings_repository.get_int(SettingKey.LAST_ACCRUAL_RUN)
    guard_seconds = settings_repository.get_int(SettingKey.ACCRUAL_GUARD_HOURS) * 3600
    if now - last_run < guard_seconds:
        log.info(f"Last accrual ran {(now - last_run) / 3600:.1f}h ago; skipping this run")
        return None

    # --------------------------------------------------------------------
    # SECTION 2: PER-ACCOUNT ACCRUAL
    # --------------------------------------------------------------------
    emails = account_repository.get_emails()
    log.info(f"Running daily accrual for {len(emails)} account(s)")
    summary = {"processed": 0, "failed": 0, "credited": 0}
    for email in emails:
        try:
            credit = accrue_account(email, now)
        except Exception as e:
            log.error(f"Accrual failed for {email}; continuing with remaining accounts", exc_info=e)
            summary["failed"] += 1
            continue
        summary["processed"] += 1
        summary["credited"] += credit
        if credit:
            log.info(f"Credited KES {credit} to {email}")

    # --------------------------------------------------------------------
    # SECTION 3: RECORD RUN
    # --------------------------------------------------------------------
    settings_repository.save(Setting(SettingKey.LAST_ACCRUAL_RUN.value, str(now)))
    log.info(
        f"Daily accrual complete: {summary['processed']} processed, "
        f"{summary['failed']} failed, KES {summary['credited']} credited"
    )
    return summary


def accrue_earnings():
    """Scheduler entry point; never lets an exception escape into the scheduler."""
    with scheduler.app.app_context():
        try:
            run_daily_accrual()
        except Exception as e:
            db.session.rollback()
            log.error("Daily accrual run aborted", exc_info=e)
