from typing import Any, Dict, List

from flask import Blueprint, current_app, jsonify, request, session

from ..errors import CategoryError
from ..services.category_service import CategoryService
from ..utils.category_list import ListState
from ..utils.category_tree import CategoryNode
from ..utils.pagination import build_pagination_links, get_page_args
from ..utils.selection import SelectionTracker


bp = Blueprint("categories", __name__, url_prefix="/categories")

SELECTION_SESSION_KEY = "category_selection"


@bp.app_errorhandler(CategoryError)
def handle_category_error(exc: CategoryError):
    current_app.logger.info("Category request failed (%s): %s", exc.kind, exc.message)
    return jsonify(exc.to_dict()), exc.status_code


@bp.route("/")
def list_categories():
    page, per_page = get_page_args()
    try:
        state = ListState(
            search_term=request.args.get("q", "").strip(),
            status_filter=request.args.get("status", "all"),
            parent_filter=request.args.get("parent", "all"),
            sort_by=request.args.get("sort_by", "name"),
            sort_order=request.args.get("sort_order", "asc"),
            page=page,
            page_size=per_page,
        )
    except ValueError as exc:
        return _bad_request(str(exc))

    result = _service().list_categories(state)
    return jsonify(
        {
            "categories": [category.to_dict() for category in result.items],
            "total_matched": result.total_matched,
            "page": result.page,
            "per_page": result.page_size,
            "total_pages": result.total_pages,
            "page_links": build_pagination_links(result.page, result.total_pages),
            "selected_ids": _load_selection().to_list(),
            "search_debounce_ms": current_app.config["SEARCH_DEBOUNCE_MS"],
        }
    )


@bp.route("/tree")
def category_tree():
    rows = _service().flattened_tree()
    return jsonify({"categories": [_node_to_dict(node) for node in rows]})


@bp.route("/root")
def root_categories():
    page, per_page = get_page_args()
    result = _service().repository.get_categories(
        {"parent_id": None, "page": page, "limit": per_page}
    )
    return jsonify(
        {
            "categories": [category.to_dict() for category in result.categories],
            "pagination": result.pagination,
        }
    )


@bp.route("/with-counts")
def categories_with_counts():
    categories = _service().repository.get_categories_with_stats()
    return jsonify({"categories": [category.to_dict() for category in categories]})


@bp.route("/", methods=["POST"])
def create_category():
    category = _service().create_category(_request_payload())
    return jsonify({"category": category.to_dict()}), 201


@bp.route("/<int:category_id>")
def get_category(category_id: int):
    category = _service().repository.get_category(category_id)
    return jsonify({"category": category.to_dict()})


@bp.route("/<int:category_id>", methods=["PUT", "PATCH"])
def update_category(category_id: int):
    category = _service().update_category(category_id, _request_payload())
    return jsonify({"category": category.to_dict()})


@bp.route("/<int:category_id>/sort-order", methods=["PATCH"])
def update_sort_order(category_id: int):
    payload = _json_object()
    sort_order = payload.get("sort_order", payload.get("sortOrder"))
    category = _service().update_sort_order(category_id, sort_order)
    return jsonify({"category": category.to_dict()})


@bp.route("/<int:category_id>", methods=["DELETE"])
def delete_category(category_id: int):
    _service().delete_category(category_id)
    selection = _load_selection()
    if selection.is_selected(category_id):
        selection.toggle(category_id)
        _save_selection(selection)
    return jsonify({"deleted": [category_id]})


@bp.route("/<int:category_id>/can-delete")
def can_delete_category(category_id: int):
    return jsonify(_service().can_delete_category(category_id).to_dict())


@bp.route("/<int:category_id>/subcategories")
def list_subcategories(category_id: int):
    children = _service().repository.get_subcategories(category_id)
    return jsonify({"subcategories": [child.to_dict() for child in children]})


@bp.route("/<int:category_id>/parent-options")
def parent_options(category_id: int):
    rows = _service().parent_options(category_id)
    return jsonify({"categories": [_node_to_dict(node) for node in rows]})


@bp.route("/bulk-delete", methods=["POST"])
def bulk_delete_categories():
    payload = _json_object()
    selection = _load_selection()
    if "ids" in payload:
        selected_ids = _parse_ids(payload.get("ids") or [])
    else:
        selected_ids = selection.to_list()
    if not selected_ids:
        return _bad_request("No categories selected")

    deleted = _service().bulk_delete_categories(selected_ids)
    selection.discard_missing(set(selection.selected()) - set(deleted))
    _save_selection(selection)
    return jsonify({"deleted": deleted})


@bp.route("/selection")
def get_selection():
    return jsonify({"selected_ids": _load_selection().to_list()})


@bp.route("/selection/toggle", methods=["POST"])
def toggle_selection():
    ids = _parse_ids([_json_object().get("id")])
    if not ids:
        return _bad_request("A category id is required")
    selection = _load_selection()
    selected = selection.toggle(ids[0])
    _save_selection(selection)
    return jsonify({"id": ids[0], "selected": selected, "selected_ids": selection.to_list()})


@bp.route("/selection/select-all", methods=["POST"])
def select_all():
    ids = _parse_ids(_json_object().get("ids") or [])
    selection = _load_selection()
    selection.select_all(ids)
    _save_selection(selection)
    return jsonify({"selected_ids": selection.to_list()})


@bp.route("/selection/clear", methods=["POST"])
def clear_selection():
    selection = _load_selection()
    selection.clear()
    _save_selection(selection)
    return jsonify({"selected_ids": []})


def _service() -> CategoryService:
    return CategoryService(current_app.extensions["category_repository"])


def _request_payload() -> Any:
    payload = request.get_json(silent=True)
    if payload is None:
        payload = request.form.to_dict()
    return payload


def _json_object() -> Dict[str, Any]:
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def _bad_request(message: str):
    return jsonify({"error": "bad_request", "message": message}), 400


def _parse_ids(values: Any) -> List[int]:
    if not isinstance(values, (list, tuple)):
        return []
    ids: List[int] = []
    for value in values:
        try:
            ids.append(int(value))
        except (TypeError, ValueError):
            continue
    return ids


def _load_selection() -> SelectionTracker:
    return SelectionTracker.from_iterable(session.get(SELECTION_SESSION_KEY))


def _save_selection(selection: SelectionTracker) -> None:
    session[SELECTION_SESSION_KEY] = selection.to_list()


def _node_to_dict(node: CategoryNode) -> Dict[str, Any]:
    data = node["category"].to_dict()
    data["level"] = node["level"]
    data["has_children"] = node["has_children"]
    return data
