from flask import current_app, jsonify, request
from flask_jwt_extended import jwt_required

from flyover_cms.application.resources.definition import STAFF_ROLES
from flyover_cms.application.uploads.store_upload import store_upload
from flyover_cms.extensions import get_registry, get_settings
from flyover_cms.utils.decorators import current_actor_id, roles_required

from . import v1_bp


@v1_bp.route("/admin/uploads", methods=["POST"])
@jwt_required()
@roles_required(*STAFF_ROLES)
def upload_file():
    upload = store_upload(
        service=get_registry().get("uploads"),
        settings=get_settings(),
        file=request.files.get("file"),
        upload_folder=current_app.config["UPLOAD_FOLDER"],
        actor_id=current_actor_id(),
    )

    return jsonify({"success": True, "upload": upload}), 201
