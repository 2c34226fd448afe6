from flask import Blueprint

order = Blueprint("order", __name__, url_prefix="/api/order")

from . import routes as routes  # noqa: E402, F401
