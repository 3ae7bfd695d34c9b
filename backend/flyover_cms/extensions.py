from flask import current_app
from flask_jwt_extended import JWTManager

jwt = JWTManager()


def get_gateway():
    return current_app.extensions["mongo"]


def get_registry():
    return current_app.extensions["resources"]


def get_settings():
    return current_app.extensions["settings"]
