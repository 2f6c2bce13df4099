from flask import Blueprint, current_app, jsonify

from ..services.category_service import CategoryService


bp = Blueprint("stats", __name__, url_prefix="/stats")


@bp.route("/categories")
def category_dashboard():
    service = CategoryService(current_app.extensions["category_repository"])
    return jsonify(service.dashboard_stats())
