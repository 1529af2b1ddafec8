import logging

from flask import jsonify, request

from bitfreeze import deposits, offers, withdrawals
from bitfreeze.domain.catalog import catalog
from bitfreeze.domain.settings import DEFAULT_SETTINGS, Setting, SettingKey
from bitfreeze.domain.transactions import DepositStatus, WithdrawalStatus
from bitfreeze.errors import ValidationError
from bitfreeze.extensions import db
from bitfreeze.models.account_repository import SqlAlchemyAccountRepository
from bitfreeze.models.setting_repository import SqlAlchemySettingRepository
from bitfreeze.models.transaction_repository import (
    SqlAlchemyDepositRepository,
    SqlAlchemyWithdrawalRepository,
)
from bitfreeze.utils.auth import admin_required
from bitfreeze.web import admin_bp, json_body

log = logging.getLogger("admin")
account_repository = SqlAlchemyAccountRepository(db)
deposit_repository = SqlAlchemyDepositRepository(db)
withdrawal_repository = SqlAlchemyWithdrawalRepository(db)
settings_repository = SqlAlchemySettingRepository(db)

# Settings an admin may change at runtime; the accrual run marker is job state
EDITABLE_SETTINGS = [k.value for k in SettingKey if k is not SettingKey.LAST_ACCRUAL_RUN]


@admin_bp.route("/deposits", methods=["GET"])
@admin_required
def list_deposits():
    return jsonify({"deposits": [d.to_dict() for d in deposits.list_pending()]})


@admin_bp.route("/deposits/confirm", methods=["POST"])
@admin_required
def confirm_deposit():
    deposit_id = json_body().get("depositId")
    if not deposit_id:
        raise ValidationError("depositId required")
    deposit = deposits.confirm_deposit(deposit_id)
    return jsonify({"message": "Deposit confirmed", "deposit": deposit.to_dict()})


@admin_bp.route("/withdraws", methods=["GET"])
@admin_required
def list_withdrawals():
    status = request.args.get("status")
    if status:
        try:
            status = WithdrawalStatus(status)
        except ValueError:
            raise ValidationError(f"Unknown status '{status}'")
    return jsonify({"withdraws": [w.to_dict() for w in withdrawals.list_withdrawals(status)]})


@admin_bp.route("/withdraws/approve", methods=["POST"])
@admin_required
def approve_withdrawal():
    data = json_body()
    request_id = data.get("requestId") or data.get("id")
    if not request_id:
        raise ValidationError("requestId required")
    withdrawal = withdrawals.approve_withdrawal(request_id)
    return jsonify({"message": "Withdrawal approved", "withdraw": withdrawal.to_dict()})


@admin_bp.route("/withdraws/reject", methods=["POST"])
@admin_required
def reject_withdrawal():
    data = json_body()
    request_id = data.get("requestId") or data.get("id")
    if not request_id:
        raise ValidationError("requestId required")
    withdrawal = withdrawals.reject_withdrawal(request_id, data.get("reason"))
    return jsonify({"message": "Withdrawal rejected", "withdraw": withdrawal.to_dict()})


@admin_bp.route("/offercode", methods=["POST"])
@admin_required
def create_offer_code():
    data = json_body()
    offer = offers.create_offer_code(data.get("code"), data.get("amount"))
    return jsonify({"message": "Offer code created", "offer": offer.to_dict()})


@admin_bp.route("/unlock", methods=["POST"])
@admin_required
def unlock_fridge():
    data = json_body()
    entry = catalog.unlock(
        data.get("fridgeId"),
        data.get("price"),
        data.get("dailyEarn"),
        data.get("durationHours"),
    )
    return jsonify({"message": f"{entry.name} unlocked", "fridge": entry.to_dict()})


@admin_bp.route("/lock", methods=["POST"])
@admin_required
def lock_fridge():
    entry = catalog.lock(json_body().get("fridgeId"))
    return jsonify({"message": f"{entry.name} locked", "fridge": entry.to_dict()})


@admin_bp.route("/info", methods=["GET"])
@admin_required
def info():
    return jsonify(
        {
            "users": account_repository.count(),
            "deposits": deposit_repository.count(),
            "pendingDeposits": len(deposit_repository.get_all(DepositStatus.PENDING)),
            "withdraws": withdrawal_repository.count(),
            "pendingWithdraws": len(withdrawal_repository.get_all(WithdrawalStatus.PENDING)),
        }
    )


def _settings_payload():
    return jsonify({"settings": {key: settings_repository.get(key) for key in DEFAULT_SETTINGS}})


@admin_bp.route("/settings", methods=["GET"])
@admin_required
def get_settings():
    return _settings_payload()


def _normalize_setting(key, val) -> str:
    if key == SettingKey.SIMULATE_MPESA.value:
        return "True" if val in (True, "True", "true", "1", 1) else "False"
    if key == SettingKey.WITHDRAWAL_DAYS.value:
        days = [d.strip() for d in str(val).split(",") if d.strip()]
        if not all(d.isdigit() and int(d) < 7 for d in days):
            raise ValidationError("withdrawal_days must be comma separated weekday numbers 0-6")
        return ",".join(days)
    if not str(val).isdigit():
        raise ValidationError(f"{key} must be a whole number")
    return str(val)


@admin_bp.route("/settings", methods=["POST"])
@admin_required
def save_settings():
    data = json_body().get("settings") or {}
    unknown = [key for key in data if key not in EDITABLE_SETTINGS]
    if unknown:
        raise ValidationError(f"Unknown setting(s): {', '.join(sorted(unknown))}")

    # Validate everything before writing anything
    updates = {key: _normalize_setting(key, val) for key, val in data.items()}
    for key, val in updates.items():
        settings_repository.save(Setting(key, val), commit=False)
    db.session.commit()

    log.info(f"Settings updated: {', '.join(sorted(data)) or 'none'}")
    return _settings_payload()
