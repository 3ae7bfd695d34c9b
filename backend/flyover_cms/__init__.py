import logging
import os
from typing import Optional

from flask import Flask, current_app, send_file, send_from_directory
from flask_swagger_ui import get_swaggerui_blueprint

from .application.resources.registry import ResourceRegistry
from .application.settings.service import SettingsService, defaults_from_config
from .commands import register_commands
from .config import config_by_name
from .errors import register_error_handlers
from .extensions import jwt
from .persistence.gateway import MongoGateway


def create_app(config_name: str = "development", gateway: Optional[MongoGateway] = None) -> Flask:
    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])

    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    app.logger.setLevel(app.config["LOG_LEVEL"])
    logging.getLogger("flyover_cms").setLevel(app.config["LOG_LEVEL"])

    # -------------------------------------------------
    # Extensions
    # -------------------------------------------------
    jwt.init_app(app)

    if gateway is None:
        gateway = MongoGateway.from_config(app.config)

    app.extensions["mongo"] = gateway
    app.extensions["resources"] = ResourceRegistry(gateway, app.config)
    app.extensions["settings"] = SettingsService(gateway, defaults_from_config(app.config))

    # -------------------------------------------------
    # API Blueprints
    # -------------------------------------------------
    from .api.v1 import v1_bp

    app.register_blueprint(v1_bp, url_prefix="/api/v1")
    register_error_handlers(app)
    register_commands(app)

    # -------------------------------------------------
    # Stored uploads (public)
    # -------------------------------------------------
    @app.route("/uploads/<path:filename>", methods=["GET"], endpoint="uploaded_file")
    def serve_upload(filename):
        upload_folder = os.path.abspath(current_app.config["UPLOAD_FOLDER"])
        return send_from_directory(upload_folder, filename)

    # -------------------------------------------------
    # Serve OpenAPI YAML (public)
    # -------------------------------------------------
    @app.route("/openapi/cms.yaml", methods=["GET"], endpoint="openapi_cms")
    def serve_openapi():
        spec_path = os.path.join(
            current_app.root_path,
            "api",
            "v1",
            "cms_openapi.yaml",
        )

        if not os.path.exists(spec_path):
            raise FileNotFoundError("cms_openapi.yaml not found")

        return send_file(
            spec_path,
            mimetype="application/yaml",
            as_attachment=False,
        )

    # -------------------------------------------------
    # Swagger UI
    # -------------------------------------------------
    SWAGGER_URL = "/swagger"
    API_URL = "/openapi/cms.yaml"

    swaggerui_blueprint = get_swaggerui_blueprint(
        SWAGGER_URL,
        API_URL,
        config={
            "app_name": "Flyover CMS API",
            "deepLinking": True,
            "persistAuthorization": True,
        },
    )

    app.register_blueprint(swaggerui_blueprint, url_prefix=SWAGGER_URL)

    return app
