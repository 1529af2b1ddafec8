from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import or_

from bitfreeze.domain.accounts import Account, FridgeHolding
from bitfreeze.errors import NotFound
from bitfreeze.models.account import AccountModel, FridgeHoldingModel


class SqlAlchemyAccountRepository:
    def __init__(self, db: SQLAlchemy) -> None:
        self._session = db.session

    def _holding_to_model(self, holding: FridgeHolding) -> FridgeHoldingModel:
        return FridgeHoldingModel(
            fridge_id=holding.fridge_id,
            name=holding.name,
            price=holding.price,
            daily_earn=holding.daily_earn,
            bought_at=holding.bought_at,
            start_time=holding.start_time,
            duration_hours=holding.duration_hours,
            paid_out=holding.paid_out,
        )

    def _holding_to_domain(self, model: FridgeHoldingModel) -> FridgeHolding:
        return FridgeHolding(
            model.fridge_id,
            model.name,
            model.price,
            model.daily_earn,
            bought_at=model.bought_at,
            start_time=model.start_time,
            duration_hours=model.duration_hours,
            paid_out=bool(model.paid_out),
            id=model.id,
        )

    def _to_model(self, account: Account) -> AccountModel:
        return AccountModel(
            email=account.email,
            password_hash=account.password_hash,
            phone=account.phone,
            balance=account.balance,
            earning=account.earning,
            referral_code=account.referral_code,
            referred_by=account.referred_by,
            last_deposit_attempt=account.last_deposit_attempt,
            last_withdrawal_attempt=account.last_withdrawal_attempt,
            created_at=account.created_at,
            fridges=[self._holding_to_model(h) for h in account.fridges],
        )

    def _to_domain(self, model: AccountModel) -> Account:
        return Account(
            email=model.email,
            password_hash=model.password_hash,
            phone=model.phone,
            balance=model.balance or 0,
            earning=model.earning or 0,
            fridges=[self._holding_to_domain(h) for h in model.fridges],
            referral_code=model.referral_code,
            referred_by=model.referred_by,
            last_deposit_attempt=model.last_deposit_attempt,
            last_withdrawal_attempt=model.last_withdrawal_attempt,
            created_at=model.created_at,
        )

    def _query_one(self, email, for_update=False):
        query = self._session.query(AccountModel).filter_by(email=email)
        if for_update:
            query = query.with_for_update().populate_existing()
        return query.one_or_none()

    def get_all(self) -> list[Account]:
        results: list[AccountModel] = self._session.query(AccountModel).order_by(AccountModel.id).all()
        return list(map(self._to_domain, results))

    def get_emails(self) -> list[str]:
        return [row.email for row in self._session.query(AccountModel.email).order_by(AccountModel.id)]

    def get(self, email: str, for_update: bool = False) -> Account:
        result = self._query_one(email, for_update)
        if result is None:
            raise NotFound(f"Account '{email}' not found")
        return self._to_domain(result)

    def find_by_identifier(self, identifier: str):
        """Look an account up by email or phone; None if neither matches."""
        result = (
            self._session.query(AccountModel)
            .filter(or_(AccountModel.email == identifier, AccountModel.phone == identifier))
            .first()
        )
        return self._to_domain(result) if result is not None else None

    def find_by_referral_code(self, code: str):
        if not code:
            return None
        result = self._session.query(AccountModel).filter_by(referral_code=code).one_or_none()
        return self._to_domain(result) if result is not None else None

    def exists(self, email: str = None, phone: str = None, referral_code: str = None) -> bool:
        filters = []
        if email:
            filters.append(AccountModel.email == email)
        if phone:
            filters.append(AccountModel.phone == phone)
        if referral_code:
            filters.append(AccountModel.referral_code == referral_code)
        if not filters:
            return False
        return self._session.query(AccountModel.id).filter(or_(*filters)).first() is not None

    def count(self) -> int:
        return self._session.query(AccountModel).count()

    def save(self, account: Account, commit: bool = True) -> None:
        existing: AccountModel = self._query_one(account.email)
        if existing:
            existing.password_hash = account.password_hash
            existing.phone = account.phone
            existing.balance = account.balance
            existing.earning = account.earning
            existing.referral_code = account.referral_code
            existing.referred_by = account.referred_by
            existing.last_deposit_attempt = account.last_deposit_attempt
            existing.last_withdrawal_attempt = account.last_withdrawal_attempt

            # Holdings are append-only; only the payout flag changes after purchase
            by_id = {h.id: h for h in existing.fridges}
            for holding in account.fridges:
                if holding.id is None:
                    existing.fridges.append(self._holding_to_model(holding))
                elif holding.id in by_id:
                    by_id[holding.id].paid_out = holding.paid_out
        else:
            self._session.add(self._to_model(account))

        if commit:
            self._session.commit()
        else:
            self._session.flush()
