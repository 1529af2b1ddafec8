import pytest

from bitfreeze import create_app
from bitfreeze.accounts import register
from bitfreeze.domain.catalog import catalog
from bitfreeze.domain.settings import Setting, SettingKey
from bitfreeze.extensions import db as _db
from bitfreeze.models.account_repository import SqlAlchemyAccountRepository
from bitfreeze.models.setting_repository import SqlAlchemySettingRepository
from bitfreeze.models.transaction_repository import (
    SqlAlchemyDepositRepository,
    SqlAlchemyWithdrawalRepository,
)
from bitfreeze.utils.auth import create_access_token

ADMIN_PASS = "test-admin-pass"


def make_test_config(**overrides):
    test_config = {
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": "sqlite://",
        "SECRET_KEY": "testing",
        "ADMIN_PASS": ADMIN_PASS,
        "MPESA_CONSUMER_KEY": "",
        "MPESA_CONSUMER_SECRET": "",
        "MPESA_SHORTCODE": "",
        "MPESA_PASSKEY": "",
        "MPESA_CALLBACK_BASE": "",
        "MPESA_ENV": "sandbox",
        "WITHDRAWAL_TIMEZONE": "Africa/Nairobi",
    }
    test_config.update(overrides)
    return test_config


@pytest.fixture(scope="function")
def test_client():
    flask_app = create_app(make_test_config())
    catalog.reset()

    with flask_app.test_client() as testing_client:
        with flask_app.app_context():
            yield testing_client

    catalog.reset()


@pytest.fixture(scope="function")
def mpesa_configured(test_client):
    test_client.application.config.update(
        MPESA_CONSUMER_KEY="consumer_key",
        MPESA_CONSUMER_SECRET="consumer_secret",
        MPESA_SHORTCODE="174379",
        MPESA_PASSKEY="passkey",
        MPESA_CALLBACK_BASE="https://bitfreeze.example.com",
    )


@pytest.fixture(scope="function")
def seed_data(test_client):
    """alice refers bob; both have a registered phone and nothing else."""
    alice = register("alice@example.com", "password", phone="254700000001")
    bob = register("bob@example.com", "password", phone="254700000002", ref=alice.referral_code)
    return {"alice": alice, "bob": bob}


@pytest.fixture
def account_repository(test_client):
    return SqlAlchemyAccountRepository(_db)


@pytest.fixture
def deposit_repository(test_client):
    return SqlAlchemyDepositRepository(_db)


@pytest.fixture
def withdrawal_repository(test_client):
    return SqlAlchemyWithdrawalRepository(_db)


@pytest.fixture
def setting_repository(test_client):
    return SqlAlchemySettingRepository(_db)


@pytest.fixture
def fund_account(account_repository):
    def _fund(email, balance=None, earning=None):
        account = account_repository.get(email)
        if balance is not None:
            account.balance = balance
        if earning is not None:
            account.earning = earning
        account_repository.save(account)
        return account

    return _fund


@pytest.fixture
def every_day_withdrawals(setting_repository):
    setting_repository.save(Setting(SettingKey.WITHDRAWAL_DAYS.value, "0,1,2,3,4,5,6"))


@pytest.fixture
def auth_headers(test_client):
    def _headers(email):
        return {"Authorization": f"Bearer {create_access_token(email)}"}

    return _headers


@pytest.fixture
def admin_headers():
    return {"X-Admin-Pass": ADMIN_PASS}


@pytest.fixture
def make_config():
    return make_test_config
