from flask import jsonify

from bitfreeze import accounts
from bitfreeze.utils.auth import create_access_token
from bitfreeze.web import auth_bp, json_body


@auth_bp.route("/register", methods=["POST"])
def register():
    data = json_body()
    account = accounts.register(
        data.get("email"),
        data.get("password"),
        phone=data.get("phone"),
        ref=data.get("ref"),
    )
    return jsonify({"message": "Registered", "email": account.email, "refCode": account.referral_code})


@auth_bp.route("/login", methods=["POST"])
def login():
    data = json_body()
    account = accounts.authenticate(data.get("identifier") or data.get("email"), data.get("password"))
    return jsonify(
        {
            "token": create_access_token(account.email),
            "email": account.email,
            "phone": account.phone,
            "balance": account.balance,
        }
    )
