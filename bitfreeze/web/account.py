from flask import g, jsonify

from bitfreeze import accounts, offers, purchases
from bitfreeze.utils.auth import login_required
from bitfreeze.web import account_bp, json_body


@account_bp.route("/me", methods=["GET"])
@login_required
def me():
    account = accounts.get_account(g.email)
    return jsonify({"user": account.to_dict()})


@account_bp.route("/buy", methods=["POST"])
@login_required
def buy():
    fridge_id = json_body().get("fridgeId")
    account = purchases.buy_fridge(g.email, fridge_id)
    bought = account.fridges[-1]
    return jsonify({"message": f"Bought {bought.name}", "balance": account.balance})


@account_bp.route("/offer/redeem", methods=["POST"])
@login_required
def redeem_offer():
    amount = offers.redeem_offer_code(g.email, json_body().get("code"))
    return jsonify({"message": f"Offer code redeemed! KES {amount} added to your earnings."})
