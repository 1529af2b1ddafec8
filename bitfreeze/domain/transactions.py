from enum import Enum
from time import time


class DepositStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    FAILED = "failed"


class WithdrawalStatus(Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Deposit:
    def __init__(
        self,
        id,
        account_email,
        amount: int,
        phone,
        status: DepositStatus = DepositStatus.PENDING,
        gateway_ref=None,
        created_at=None,
        confirmed_at=None,
        failed_at=None,
    ):
        self.id = id
        self.account_email = account_email
        self.amount = amount
        self.phone = phone
        self.status = status
        self.gateway_ref = gateway_ref
        self.created_at = created_at if created_at is not None else int(time())
        self.confirmed_at = confirmed_at
        self.failed_at = failed_at

    def is_pending(self) -> bool:
        return self.status is DepositStatus.PENDING

    def confirm(self) -> None:
        self.status = DepositStatus.CONFIRMED
        self.confirmed_at = int(time())

    def fail(self) -> None:
        self.status = DepositStatus.FAILED
        self.failed_at = int(time())

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user": self.account_email,
            "amount": self.amount,
            "phone": self.phone,
            "status": self.status.value,
            "gatewayRef": self.gateway_ref,
            "createdAt": self.created_at,
            "confirmedAt": self.confirmed_at,
            "failedAt": self.failed_at,
        }


class Withdrawal:
    def __init__(
        self,
        id,
        account_email,
        amount: int,
        phone,
        status: WithdrawalStatus = WithdrawalStatus.PENDING,
        requested_at=None,
        approved_at=None,
        rejected_at=None,
        rejection_reason=None,
    ):
        self.id = id
        self.account_email = account_email
        self.amount = amount
        self.phone = phone
        self.status = status
        self.requested_at = requested_at if requested_at is not None else int(time())
        self.approved_at = approved_at
        self.rejected_at = rejected_at
        self.rejection_reason = rejection_reason

    def is_pending(self) -> bool:
        return self.status is WithdrawalStatus.PENDING

    def approve(self) -> None:
        self.status = WithdrawalStatus.APPROVED
        self.approved_at = int(time())

    def reject(self, reason=None) -> None:
        self.status = WithdrawalStatus.REJECTED
        self.rejected_at = int(time())
        self.rejection_reason = reason or "Rejected"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user": self.account_email,
            "amount": self.amount,
            "phone": self.phone,
            "status": self.status.value,
            "requestedAt": self.requested_at,
            "approvedAt": self.approved_at,
            "rejectedAt": self.rejected_at,
            "rejectionReason": self.rejection_reason,
        }
