from flask import Blueprint

franchise = Blueprint("franchise", __name__, url_prefix="/api/franchise")

from . import routes as routes  # noqa: E402, F401
