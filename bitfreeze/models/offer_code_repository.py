from time import time

from flask_sqlalchemy import SQLAlchemy

from bitfreeze.domain.offers import OfferCode
from bitfreeze.errors import NotFound
from bitfreeze.models.offer_code import OfferCodeModel, OfferRedemptionModel


class SqlAlchemyOfferCodeRepository:
    def __init__(self, db: SQLAlchemy) -> None:
        self._session = db.session

    def _to_domain(self, model: OfferCodeModel) -> OfferCode:
        return OfferCode(
            code=model.code,
            amount=model.amount,
            used_by=[r.account_email for r in model.redemptions],
            created_at=model.created_at,
        )

    def get(self, code: str) -> OfferCode:
        result = self._session.get(OfferCodeModel, code)
        if result is None:
            raise NotFound("Invalid offer code")
        return self._to_domain(result)

    def exists(self, code: str) -> bool:
        return self._session.get(OfferCodeModel, code) is not None

    def get_all(self) -> list[OfferCode]:
        return list(map(self._to_domain, self._session.query(OfferCodeModel).all()))

    def save(self, offer: OfferCode, commit: bool = True) -> None:
        self._session.add(OfferCodeModel(code=offer.code, amount=offer.amount, created_at=offer.created_at))
        if commit:
            self._session.commit()

    def add_redemption(self, code: str, account_email: str, commit: bool = True) -> None:
        self._session.add(OfferRedemptionModel(code=code, account_email=account_email, redeemed_at=int(time())))
        if commit:
            self._session.commit()
        else:
            self._session.flush()
