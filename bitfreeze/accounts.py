import logging

from werkzeug.security import check_password_hash, generate_password_hash

from bitfreeze.domain.accounts import Account
from bitfreeze.errors import Unauthorized, ValidationError
from bitfreeze.extensions import db
from bitfreeze.models.account_repository import SqlAlchemyAccountRepository
from bitfreeze.utils.account_utils import clean_phone, unique_referral_code

log = logging.getLogger("accounts")

account_repository = SqlAlchemyAccountRepository(db)


def register(email, password, phone=None, ref=None) -> Account:
    email = str(email or "").strip().lower()
    phone = clean_phone(phone) or None
    if not email or not password:
        raise ValidationError("Email & password required")
    if account_repository.exists(email=email):
        raise ValidationError("User exists")
    if phone and account_repository.exists(phone=phone):
        raise ValidationError("Phone already registered")

    account = Account(
        email,
        password_hash=generate_password_hash(password),
        phone=phone,
        referral_code=unique_referral_code(account_repository),
        referred_by=str(ref).strip() if ref else None,
    )
    account_repository.save(account)
    log.info(f"Registered {email}" + (f" referred by {account.referred_by}" if account.referred_by else ""))
    return account


def authenticate(identifier, password) -> Account:
    """Identifier may be the account's email or phone."""
    identifier = str(identifier or "").strip()
    if not identifier or not password:
        raise ValidationError("Identifier & password required")

    if "@" in identifier:
        identifier = identifier.lower()

    account = account_repository.find_by_identifier(identifier)
    if account is None or not account.password_hash or not check_password_hash(account.password_hash, password):
        log.info("Rejected login with invalid credentials")
        raise Unauthorized("Invalid credentials")
    return account


def get_account(email: str) -> Account:
    return account_repository.get(email)
