# flyover_cms/api/v1/public.py
from flask import jsonify, request

from flyover_cms.domain.exceptions import NotFound
from flyover_cms.extensions import get_registry
from flyover_cms.normalizers.pagination import normalize_pagination

from . import v1_bp


def _public_service(resource):
    service = get_registry().get(resource)
    if not service.definition.is_public:
        raise NotFound(f"Unknown resource: {resource}")
    return service


@v1_bp.route("/<resource>", methods=["GET"])
def public_list(resource):
    service = _public_service(resource)
    definition = service.definition

    result = service.list(
        page=request.args.get("page", 1),
        limit=request.args.get("limit"),
        search=request.args.get("search"),
        filters=request.args,
        base_filter=dict(definition.public_filter),
    )

    return jsonify(normalize_pagination(
        result,
        lambda item: item,
        key=definition.plural,
    )), 200


@v1_bp.route("/<resource>/<key>", methods=["GET"])
def public_detail(resource, key):
    service = _public_service(resource)
    definition = service.definition

    if not definition.public_lookup:
        raise NotFound(f"Unknown resource: {resource}")

    item = service.find_one({definition.public_lookup: key, **definition.public_filter})

    return jsonify({"success": True, definition.singular: item}), 200
