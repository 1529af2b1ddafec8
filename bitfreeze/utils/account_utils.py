import secrets

from bitfreeze.errors import ValidationError


def make_id(length: int = 12) -> str:
    """Random lowercase hex identifier."""
    return secrets.token_hex(max(1, (length + 1) // 2))[:length]


def unique_referral_code(account_repository, length: int = 6, attempts: int = 10) -> str:
    for _ in range(attempts):
        code = make_id(length)
        if not account_repository.exists(referral_code=code):
            return code
    # Fall back to a longer code rather than looping forever
    return make_id(length * 2)


def clean_phone(phone) -> str:
    return str(phone or "").strip()


def parse_amount(amount) -> int:
    """Accept a positive whole number of shillings as int, integral float or digit string."""
    if isinstance(amount, str) and amount.strip().isdigit():
        amount = int(amount.strip())
    if isinstance(amount, float) and amount.is_integer():
        amount = int(amount)
    if not isinstance(amount, int) or isinstance(amount, bool) or amount <= 0:
        raise ValidationError("Amount must be a positive whole number")
    return amount
