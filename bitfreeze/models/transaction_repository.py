from flask_sqlalchemy import SQLAlchemy

from bitfreeze.domain.transactions import Deposit, DepositStatus, Withdrawal, WithdrawalStatus
from bitfreeze.errors import NotFound
from bitfreeze.models.transaction import DepositModel, WithdrawalModel


class SqlAlchemyDepositRepository:
    def __init__(self, db: SQLAlchemy) -> None:
        self._session = db.session

    def _to_domain(self, model: DepositModel) -> Deposit:
        return Deposit(
            id=model.id,
            account_email=model.account_email,
            amount=model.amount,
            phone=model.phone,
            status=DepositStatus(model.status),
            gateway_ref=model.gateway_ref,
            created_at=model.created_at,
            confirmed_at=model.confirmed_at,
            failed_at=model.failed_at,
        )

    def get(self, deposit_id: str, for_update: bool = False) -> Deposit:
        query = self._session.query(DepositModel).filter_by(id=deposit_id)
        if for_update:
            query = query.with_for_update().populate_existing()
        result = query.one_or_none()
        if result is None:
            raise NotFound(f"Deposit '{deposit_id}' not found")
        return self._to_domain(result)

    def get_by_gateway_ref(self, gateway_ref: str) -> Deposit:
        result = self._session.query(DepositModel).filter_by(gateway_ref=gateway_ref).one_or_none()
        if result is None:
            raise NotFound(f"No deposit for gateway reference '{gateway_ref}'")
        return self._to_domain(result)

    def get_all(self, status: DepositStatus = None) -> list[Deposit]:
        query = self._session.query(DepositModel)
        if status is not None:
            query = query.filter_by(status=status.value)
        return list(map(self._to_domain, query.order_by(DepositModel.created_at).all()))

    def get_pending_since(self, account_email: str, since: int) -> list[Deposit]:
        results = (
            self._session.query(DepositModel)
            .filter(
                DepositModel.account_email == account_email,
                DepositModel.status == DepositStatus.PENDING.value,
                DepositModel.created_at >= since,
            )
            .all()
        )
        return list(map(self._to_domain, results))

    def get_latest_confirmed(self, account_email: str):
        result = (
            self._session.query(DepositModel)
            .filter_by(account_email=account_email, status=DepositStatus.CONFIRMED.value)
            .order_by(DepositModel.confirmed_at.desc())
            .first()
        )
        return self._to_domain(result) if result is not None else None

    def count(self) -> int:
        return self._session.query(DepositModel).count()

    def save(self, deposit: Deposit, commit: bool = True) -> None:
        model = DepositModel(
            id=deposit.id,
            account_email=deposit.account_email,
            amount=deposit.amount,
            phone=deposit.phone,
            status=deposit.status.value,
            gateway_ref=deposit.gateway_ref,
            created_at=deposit.created_at,
            confirmed_at=deposit.confirmed_at,
            failed_at=deposit.failed_at,
        )
        self._session.merge(model)
        if commit:
            self._session.commit()
        else:
            self._session.flush()


class SqlAlchemyWithdrawalRepository:
    def __init__(self, db: SQLAlchemy) -> None:
        self._session = db.session

    def _to_domain(self, model: WithdrawalModel) -> Withdrawal:
        return Withdrawal(
            id=model.id,
            account_email=model.account_email,
            amount=model.amount,
            phone=model.phone,
            status=WithdrawalStatus(model.status),
            requested_at=model.requested_at,
            approved_at=model.approved_at,
            rejected_at=model.rejected_at,
            rejection_reason=model.rejection_reason,
        )

    def get(self, withdrawal_id: str, for_update: bool = False) -> Withdrawal:
        query = self._session.query(WithdrawalModel).filter_by(id=withdrawal_id)
        if for_update:
            query = query.with_for_update().populate_existing()
        result = query.one_or_none()
        if result is None:
            raise NotFound(f"Withdrawal request '{withdrawal_id}' not found")
        return self._to_domain(result)

    def get_all(self, status: WithdrawalStatus = None) -> list[Withdrawal]:
        query = self._session.query(WithdrawalModel)
        if status is not None:
            query = query.filter_by(status=status.value)
        return list(map(self._to_domain, query.order_by(WithdrawalModel.requested_at).all()))

    def get_pending_since(self, account_email: str, since: int) -> list[Withdrawal]:
        results = (
            self._session.query(WithdrawalModel)
            .filter(
                WithdrawalModel.account_email == account_email,
                WithdrawalModel.status == WithdrawalStatus.PENDING.value,
                WithdrawalModel.requested_at >= since,
            )
            .all()
        )
        return list(map(self._to_domain, results))

    def count(self) -> int:
        return self._session.query(WithdrawalModel).count()

    def save(self, withdrawal: Withdrawal, commit: bool = True) -> None:
        model = WithdrawalModel(
            id=withdrawal.id,
            account_email=withdrawal.account_email,
            amount=withdrawal.amount,
            phone=withdrawal.phone,
            status=withdrawal.status.value,
            requested_at=withdrawal.requested_at,
            approved_at=withdrawal.approved_at,
            rejected_at=withdrawal.rejected_at,
            rejection_reason=withdrawal.rejection_reason,
        )
        self._session.merge(model)
        if commit:
            self._session.commit()
        else:
            self._session.flush()
