# flyover_cms/api/v1/admin_resources.py
from flask import jsonify, request
from flask_jwt_extended import jwt_required

from flyover_cms.domain.exceptions import NotFound
from flyover_cms.extensions import get_registry
from flyover_cms.normalizers.pagination import normalize_pagination
from flyover_cms.utils.decorators import check_roles, current_actor_id

from . import v1_bp


def _service(resource, operation, *, write=False):
    service = get_registry().get(resource)
    definition = service.definition

    check_roles(definition.write_roles if write else definition.read_roles)

    if not definition.allows(operation):
        raise NotFound(f"{definition.label} does not support {operation}")

    return service


def _item_response(service, item, status=200):
    return jsonify({"success": True, service.definition.singular: item}), status


# ------------------------
# Collection
# ------------------------

@v1_bp.route("/admin/<resource>", methods=["GET"])
@jwt_required()
def admin_list(resource):
    service = _service(resource, "list")

    result = service.list(
        page=request.args.get("page", 1),
        limit=request.args.get("limit"),
        search=request.args.get("search"),
        filters=request.args,
    )

    return jsonify(normalize_pagination(
        result,
        lambda item: item,
        key=service.definition.plural,
    )), 200


@v1_bp.route("/admin/<resource>", methods=["POST"])
@jwt_required()
def admin_create(resource):
    service = _service(resource, "create", write=True)
    data = request.get_json(silent=True)

    item = service.create(data, actor_id=current_actor_id())

    return _item_response(service, item, 201)


@v1_bp.route("/admin/<resource>/reorder", methods=["POST"])
@jwt_required()
def admin_reorder(resource):
    service = _service(resource, "update", write=True)
    data = request.get_json(silent=True)

    # Accept a bare list or {"items": [...]}
    if isinstance(data, dict):
        data = data.get("items")

    items = service.reorder(data, actor_id=current_actor_id())

    return jsonify({"success": True, service.definition.plural: items}), 200


# ------------------------
# Single item
# ------------------------

@v1_bp.route("/admin/<resource>/<item_id>", methods=["GET"])
@jwt_required()
def admin_get(resource, item_id):
    service = _service(resource, "get")
    return _item_response(service, service.get(item_id))


@v1_bp.route("/admin/<resource>/<item_id>", methods=["PUT", "PATCH"])
@jwt_required()
def admin_update(resource, item_id):
    service = _service(resource, "update", write=True)
    data = request.get_json(silent=True)

    item = service.update(item_id, data, actor_id=current_actor_id())

    return _item_response(service, item)


@v1_bp.route("/admin/<resource>/<item_id>", methods=["DELETE"])
@jwt_required()
def admin_delete(resource, item_id):
    service = _service(resource, "delete", write=True)

    service.delete(item_id, actor_id=current_actor_id())

    return jsonify({
        "success": True,
        "message": f"{service.definition.label} deleted successfully",
    }), 200
