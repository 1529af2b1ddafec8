import os

basedir = os.path.abspath(os.path.dirname(__file__))


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY") or "bitfreeze_dev_secret_change_me"
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URI"
    ) or "sqlite:///" + os.path.join(basedir, "bitfreeze.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    ADMIN_PASS = os.environ.get("ADMIN_PASS") or "adminpass"
    JWT_EXPIRY_SECONDS = int(os.environ.get("JWT_EXPIRY_SECONDS") or 7 * 24 * 3600)

    MPESA_CONSUMER_KEY = os.environ.get("MPESA_CONSUMER_KEY") or ""
    MPESA_CONSUMER_SECRET = os.environ.get("MPESA_CONSUMER_SECRET") or ""
    MPESA_SHORTCODE = os.environ.get("MPESA_SHORTCODE") or ""
    MPESA_PASSKEY = os.environ.get("MPESA_PASSKEY") or ""
    MPESA_ENV = os.environ.get("MPESA_ENV") or "sandbox"
    MPESA_CALLBACK_BASE = os.environ.get("MPESA_CALLBACK_BASE") or ""
    MPESA_TIMEOUT_SECONDS = int(os.environ.get("MPESA_TIMEOUT_SECONDS") or 20)

    ACCRUAL_CRON_HOUR = int(os.environ.get("ACCRUAL_CRON_HOUR") or 0)
    ACCRUAL_CRON_MINUTE = int(os.environ.get("ACCRUAL_CRON_MINUTE") or 5)
    WITHDRAWAL_TIMEZONE = os.environ.get("WITHDRAWAL_TIMEZONE") or "Africa/Nairobi"
