from flask import jsonify

from flyover_cms.extensions import get_gateway

from . import v1_bp


@v1_bp.route('/health', methods=['GET'])
def health_check():
    return jsonify({
        "status": "ok",
        "service": "flyover-cms",
        "database": "connected" if get_gateway().connected else "idle",
    })
