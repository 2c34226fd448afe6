from flask import Blueprint

auth = Blueprint("auth", __name__, url_prefix="/api/auth")

from . import routes as routes  # noqa: E402, F401
