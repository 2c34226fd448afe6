from flask import g, jsonify, request

from pizza_service.auth import auth_required
from pizza_service.services import UserService
from pizza_service.utils.responses import message_response
from . import auth


@auth.route("", methods=["POST"])
def register():
    """Registers a new diner and logs them in."""
    data = request.get_json(silent=True) or {}
    user, token = UserService.register(
        data.get("name"), data.get("email"), data.get("password")
    )
    return jsonify({"user": user.to_dict(), "token": token})


@auth.route("", methods=["PUT"])
def login():
    """Logs in an existing user."""
    data = request.get_json(silent=True) or {}
    user, token = UserService.login(data.get("email"), data.get("password"))
    return jsonify({"user": user.to_dict(), "token": token})


@auth.route("", methods=["DELETE"])
@auth_required
def logout():
    """Invalidates the caller's token."""
    UserService.logout(g.current_token)
    return message_response("logout successful")


@auth.route("/<int:user_id>", methods=["PUT"])
@auth_required
def update_user(user_id):
    """Updates a user's email or password. Users may only update themselves unless admin."""
    data = request.get_json(silent=True) or {}
    user = UserService.update_user(
        user_id, g.current_user, email=data.get("email"), password=data.get("password")
    )
    return jsonify(user.to_dict())
