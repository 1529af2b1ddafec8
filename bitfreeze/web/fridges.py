from flask import jsonify

from bitfreeze.domain.catalog import catalog
from bitfreeze.web import fridges_bp


@fridges_bp.route("/fridges", methods=["GET"])
def index():
    return jsonify({"fridges": [entry.to_dict() for entry in catalog.list()]})
