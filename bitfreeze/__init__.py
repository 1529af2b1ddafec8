import logging
from flask import Flask
from bitfreeze.config import Config


def create_app(test_config=None):
    logging.basicConfig(level=logging.INFO)

    app = Flask(__name__, instance_relative_config=True)
    if test_config is None:
        app.config.from_object(Config)
    else:
        app.config.from_object(Config)
        app.config.from_mapping(test_config)

    from .core import accrue_earnings
    from .extensions import db, scheduler

    # Register every table before create_all
    from .models import account, offer_code, setting, transaction  # noqa: F401

    db.init_app(app)
    # Create tables (if migrations are not yet set up)
    with app.app_context():
        db.create_all()

    from .web import (
        account_bp,
        admin_bp,
        auth_bp,
        deposits_bp,
        fridges_bp,
        home_bp,
        register_error_handlers,
        withdrawals_bp,
    )

    app.register_blueprint(home_bp)
    app.register_blueprint(auth_bp, url_prefix="/api")
    app.register_blueprint(account_bp, url_prefix="/api")
    app.register_blueprint(fridges_bp, url_prefix="/api")
    app.register_blueprint(deposits_bp, url_prefix="/api")
    app.register_blueprint(withdrawals_bp, url_prefix="/api")
    app.register_blueprint(admin_bp, url_prefix="/api/admin")
    register_error_handlers(app)

    # Skip scheduler setup when testing
    if app.config["TESTING"]:
        return app

    scheduler.init_app(app)
    scheduler.add_job(
        id="accrue_earnings",
        func=accrue_earnings,
        trigger="cron",
        hour=app.config["ACCRUAL_CRON_HOUR"],
        minute=app.config["ACCRUAL_CRON_MINUTE"],
        timezone="UTC",
    )
    scheduler.start()

    return app
