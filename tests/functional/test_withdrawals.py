import pytest

from bitfreeze.accounts import register
from bitfreeze.deposits import confirm_deposit, request_deposit
from bitfreeze.domain.transactions import WithdrawalStatus
from bitfreeze.errors import (
    AlreadyProcessed,
    DuplicatePending,
    InsufficientFunds,
    NotFound,
    ValidationError,
)
from bitfreeze.withdrawals import (
    approve_withdrawal,
    is_withdrawal_day,
    list_withdrawals,
    reject_withdrawal,
    request_withdrawal,
)

WEDNESDAY_NOON = 1792573200  # 2026-10-21 12:00 in Nairobi
SATURDAY_NOON = 1792832400  # 2026-10-24 12:00 in Nairobi
# Friday 23:30 UTC is already Saturday in Nairobi
FRIDAY_LATE_UTC = 1792798200


@pytest.fixture
def on_wednesday(mocker):
    return mocker.patch("bitfreeze.withdrawals.time", return_value=WEDNESDAY_NOON)


@pytest.fixture
def alice_earning(seed_data, fund_account):
    fund_account("alice@example.com", earning=1000)


def test_request_withdrawal(on_wednesday, alice_earning, account_repository):
    withdrawal = request_withdrawal("alice@example.com", 300, "254700000001")

    assert withdrawal.status is WithdrawalStatus.PENDING
    assert withdrawal.requested_at == WEDNESDAY_NOON
    # Nothing is reserved until an admin approves
    account = account_repository.get("alice@example.com")
    assert account.earning == 1000
    assert account.last_withdrawal_attempt == WEDNESDAY_NOON
    assert [w.id for w in list_withdrawals(WithdrawalStatus.PENDING)] == [withdrawal.id]


def test_withdrawal_below_minimum(on_wednesday, alice_earning):
    with pytest.raises(ValidationError) as e:
        request_withdrawal("alice@example.com", 100, "254700000001")
    assert e.value.message == "Minimum withdrawal is KES 200"


def test_withdrawal_phone_mismatch(on_wednesday, alice_earning):
    with pytest.raises(ValidationError) as e:
        request_withdrawal("alice@example.com", 300, "254799999999")
    assert e.value.message == "phone mismatch"
    assert list_withdrawals() == []


def test_withdrawal_on_weekend(mocker, alice_earning):
    mocker.patch("bitfreeze.withdrawals.time", return_value=SATURDAY_NOON)
    with pytest.raises(ValidationError) as e:
        request_withdrawal("alice@example.com", 300, "254700000001")
    assert "Monday, Tuesday, Wednesday, Thursday, Friday" in e.value.message


def test_withdrawal_day_uses_nairobi_time(test_client):
    assert is_withdrawal_day(WEDNESDAY_NOON)
    assert not is_withdrawal_day(SATURDAY_NOON)
    assert not is_withdrawal_day(FRIDAY_LATE_UTC)


def test_weekend_withdrawal_allowed_when_configured(mocker, alice_earning, every_day_withdrawals):
    mocker.patch("bitfreeze.withdrawals.time", return_value=SATURDAY_NOON)
    withdrawal = request_withdrawal("alice@example.com", 300, "254700000001")
    assert withdrawal.is_pending()


def test_withdrawal_more_than_earning(on_wednesday, alice_earning):
    with pytest.raises(InsufficientFunds):
        request_withdrawal("alice@example.com", 5000, "254700000001")


def test_balance_cannot_be_withdrawn(on_wednesday, seed_data, fund_account):
    fund_account("alice@example.com", balance=5000, earning=0)
    with pytest.raises(InsufficientFunds):
        request_withdrawal("alice@example.com", 300, "254700000001")


def test_second_pending_withdrawal_is_rejected(on_wednesday, alice_earning):
    request_withdrawal("alice@example.com", 300, "254700000001")

    on_wednesday.return_value = WEDNESDAY_NOON + 3600
    with pytest.raises(DuplicatePending):
        request_withdrawal("alice@example.com", 300, "254700000001")


def test_approve_debits_earning_once(on_wednesday, alice_earning, account_repository):
    withdrawal = request_withdrawal("alice@example.com", 300, "254700000001")

    approved = approve_withdrawal(withdrawal.id)
    assert approved.status is WithdrawalStatus.APPROVED
    assert account_repository.get("alice@example.com").earning == 700

    with pytest.raises(AlreadyProcessed):
        approve_withdrawal(withdrawal.id)
    with pytest.raises(AlreadyProcessed):
        reject_withdrawal(withdrawal.id)
    assert account_repository.get("alice@example.com").earning == 700


def test_approval_rechecks_earning(on_wednesday, alice_earning, fund_account):
    withdrawal = request_withdrawal("alice@example.com", 800, "254700000001")
    fund_account("alice@example.com", earning=100)

    with pytest.raises(InsufficientFunds):
        approve_withdrawal(withdrawal.id)

    assert list_withdrawals(WithdrawalStatus.PENDING)[0].id == withdrawal.id


def test_reject_keeps_earning(on_wednesday, alice_earning, account_repository):
    withdrawal = request_withdrawal("alice@example.com", 300, "254700000001")

    rejected = reject_withdrawal(withdrawal.id, "Wrong number")

    assert rejected.status is WithdrawalStatus.REJECTED
    assert rejected.rejection_reason == "Wrong number"
    assert account_repository.get("alice@example.com").earning == 1000
    with pytest.raises(AlreadyProcessed):
        approve_withdrawal(withdrawal.id)


def test_approve_unknown_withdrawal(test_client):
    with pytest.raises(NotFound):
        approve_withdrawal("missing")


def test_payout_phone_falls_back_to_last_deposit(on_wednesday, test_client, fund_account):
    register("dave@example.com", "password")
    fund_account("dave@example.com", earning=1000)

    with pytest.raises(ValidationError) as e:
        request_withdrawal("dave@example.com", 300, "254711111111")
    assert e.value.message == "No phone on record for this account"

    confirm_deposit(request_deposit("dave@example.com", 500, "254711111111").id)

    withdrawal = request_withdrawal("dave@example.com", 300, "254711111111")
    assert withdrawal.phone == "254711111111"
