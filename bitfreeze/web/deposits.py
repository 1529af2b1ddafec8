import logging

from flask import g, jsonify

from bitfreeze import deposits
from bitfreeze.domain.gateway import parse_callback
from bitfreeze.domain.transactions import DepositStatus
from bitfreeze.errors import AlreadyProcessed, NotFound, ValidationError
from bitfreeze.utils.auth import login_required
from bitfreeze.web import deposits_bp, json_body

log = logging.getLogger("deposits")


@deposits_bp.route("/deposit", methods=["POST"])
@login_required
def request_deposit():
    data = json_body()
    deposit = deposits.request_deposit(g.email, data.get("amount"), data.get("phone"))

    if deposit.status is DepositStatus.CONFIRMED:
        message = "Deposit simulated and confirmed"
    elif deposit.gateway_ref:
        message = "STK Push initiated - check your phone"
    else:
        message = "Deposit recorded as pending. Admin must confirm."
    return jsonify({"message": message, "depositId": deposit.id, "status": deposit.status.value})


@deposits_bp.route("/mpesa/callback", methods=["POST"])
def mpesa_callback():
    # Always answer 200 so the provider does not keep retrying
    gateway_ref, success = parse_callback(json_body())
    if not gateway_ref:
        return jsonify({"result": "ignored - no checkout id"})
    try:
        deposit = deposits.handle_callback(gateway_ref, success)
    except NotFound:
        log.info(f"Callback for unknown gateway reference {gateway_ref}")
        return jsonify({"result": "no matching deposit"})
    except AlreadyProcessed:
        return jsonify({"result": "already processed"})
    except ValidationError as e:
        return jsonify({"result": e.message})

    if deposit.status is DepositStatus.CONFIRMED:
        return jsonify({"result": "ok - confirmed"})
    return jsonify({"result": "not success"})
