from flask import g, jsonify

from bitfreeze import withdrawals
from bitfreeze.utils.auth import login_required
from bitfreeze.web import withdrawals_bp, json_body


@withdrawals_bp.route("/withdraw", methods=["POST"])
@login_required
def request_withdrawal():
    data = json_body()
    withdrawal = withdrawals.request_withdrawal(g.email, data.get("amount"), data.get("phone"))
    return jsonify(
        {
            "message": "Withdrawal request created. Awaiting admin approval",
            "requestId": withdrawal.id,
        }
    )
