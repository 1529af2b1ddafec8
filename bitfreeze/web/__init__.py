import logging

from flask import Blueprint, jsonify, request

from bitfreeze.errors import BitfreezeException

log = logging.getLogger("web")

home_bp = Blueprint("home", __name__)
auth_bp = Blueprint("auth", __name__)
account_bp = Blueprint("account", __name__)
fridges_bp = Blueprint("fridges", __name__)
deposits_bp = Blueprint("deposits", __name__)
withdrawals_bp = Blueprint("withdrawals", __name__)
admin_bp = Blueprint("admin", __name__)


def json_body() -> dict:
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


def register_error_handlers(app) -> None:
    @app.errorhandler(BitfreezeException)
    def handle_bitfreeze_exception(e: BitfreezeException):
        return jsonify({"error": e.message}), e.status_code

    @app.errorhandler(500)
    def handle_server_error(e):
        log.error("Unhandled error serving request", exc_info=getattr(e, "original_exception", e))
        return jsonify({"error": "Server error"}), 500


# View modules attach their routes to the blueprints above
from bitfreeze.web import account as account  # noqa: E402
from bitfreeze.web import admin as admin  # noqa: E402
from bitfreeze.web import auth as auth  # noqa: E402
from bitfreeze.web import deposits as deposits  # noqa: E402
from bitfreeze.web import fridges as fridges  # noqa: E402
from bitfreeze.web import home as home  # noqa: E402
from bitfreeze.web import withdrawals as withdrawals  # noqa: E402
