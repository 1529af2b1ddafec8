from flask import jsonify

from bitfreeze.web import home_bp


@home_bp.route("/", methods=["GET"])
def index():
    return jsonify({"name": "Bitfreeze", "status": "ok"})
