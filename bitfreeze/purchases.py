import logging

from bitfreeze.domain.accounts import Account, FridgeHolding
from bitfreeze.domain.catalog import catalog
from bitfreeze.errors import ValidationError
from bitfreeze.extensions import db
from bitfreeze.models.account_repository import SqlAlchemyAccountRepository
from bitfreeze.utils.locks import locked_transaction

log = logging.getLogger("purchases")

account_repository = SqlAlchemyAccountRepository(db)


def buy_fridge(email: str, fridge_id) -> Account:
    if not fridge_id:
        raise ValidationError("fridgeId required")

    entry = catalog.find(fridge_id)
    if entry.locked:
        raise ValidationError(f"{entry.name} is locked")

    holding = FridgeHolding(entry.id, entry.name, entry.price, entry.daily_earn)
    if entry.is_offer():
        holding.start_time = entry.start_time
        holding.duration_hours = entry.duration_hours

    with locked_transaction(email):
        account = account_repository.get(email, for_update=True)
        account.debit_balance(entry.price)
        account.add_fridge(holding)
        account_repository.save(account, commit=False)

    log.info(f"{email} bought {entry.name} for KES {entry.price}")
    return account
