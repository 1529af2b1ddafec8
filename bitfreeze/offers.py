import logging

from bitfreeze.domain.offers import OfferCode
from bitfreeze.errors import AlreadyProcessed, ValidationError
from bitfreeze.extensions import db
from bitfreeze.models.account_repository import SqlAlchemyAccountRepository
from bitfreeze.models.offer_code_repository import SqlAlchemyOfferCodeRepository
from bitfreeze.utils.account_utils import parse_amount
from bitfreeze.utils.locks import locked_transaction

log = logging.getLogger("offers")

account_repository = SqlAlchemyAccountRepository(db)
offer_code_repository = SqlAlchemyOfferCodeRepository(db)


def create_offer_code(code, amount) -> OfferCode:
    code = str(code or "").strip()
    if not code:
        raise ValidationError("Missing fields")
    amount = parse_amount(amount)
    if offer_code_repository.exists(code):
        raise ValidationError("Offer code already exists")

    offer = OfferCode(code, amount)
    offer_code_repository.save(offer)
    log.info(f"Offer code {code} created worth KES {amount}")
    return offer


def redeem_offer_code(email: str, code) -> int:
    """Credit the code's reward to the account's earning; returns the amount credited."""
    code = str(code or "").strip()
    if not code:
        raise ValidationError("No code provided")

    with locked_transaction(email):
        account = account_repository.get(email, for_update=True)
        offer = offer_code_repository.get(code)
        if offer.is_used_by(email):
            raise AlreadyProcessed("You already used this code")

        account.credit_earning(offer.amount)
        account_repository.save(account, commit=False)
        offer_code_repository.add_redemption(code, email, commit=False)

    log.info(f"{email} redeemed offer code {code} for KES {offer.amount}")
    return offer.amount
