from flask import jsonify, request
from flask_jwt_extended import jwt_required

from flyover_cms.extensions import get_settings
from flyover_cms.utils.decorators import current_actor_id, roles_required

from . import v1_bp


@v1_bp.route("/admin/settings", methods=["GET"])
@jwt_required()
@roles_required("ADMIN")
def get_system_settings():
    return jsonify({"success": True, "settings": get_settings().get()}), 200


@v1_bp.route("/admin/settings", methods=["PUT", "POST"])
@jwt_required()
@roles_required("ADMIN")
def update_system_settings():
    settings = get_settings().update(
        request.get_json(silent=True),
        actor_id=current_actor_id(),
    )

    return jsonify({
        "success": True,
        "settings": settings,
        "message": "Settings updated successfully",
    }), 200
