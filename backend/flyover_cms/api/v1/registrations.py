from flask import jsonify, request

from flyover_cms.extensions import get_registry

from . import v1_bp


@v1_bp.route("/event-registrations", methods=["POST"])
def register_for_event():
    """Public registration form; the event checks live in RegistrationHooks."""
    service = get_registry().get("event-registrations")

    registration = service.create(request.get_json(silent=True))

    return jsonify({
        "success": True,
        "message": "Registration successful",
        "registration": registration,
    }), 201
