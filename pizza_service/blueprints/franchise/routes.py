from flask import g, jsonify, request

from pizza_service.auth import admin_required, auth_required, get_current_user
from pizza_service.services import FranchiseService
from pizza_service.utils.responses import message_response
from . import franchise


@franchise.route("", methods=["GET"])
def list_franchises():
    """Lists all franchises and their stores."""
    return jsonify(FranchiseService.list_franchises(get_current_user()))


@franchise.route("/<int:user_id>", methods=["GET"])
@auth_required
def list_user_franchises(user_id):
    """Lists the franchises a user administers."""
    return jsonify(FranchiseService.get_user_franchises(user_id, g.current_user))


@franchise.route("", methods=["POST"])
@admin_required
def create_franchise():
    data = request.get_json(silent=True) or {}
    admin_emails = [
        admin.get("email") for admin in data.get("admins") or [] if admin.get("email")
    ]
    created = FranchiseService.create_franchise(data.get("name"), admin_emails)
    return jsonify(created.to_dict(include_admins=True))


@franchise.route("/<int:franchise_id>", methods=["DELETE"])
@admin_required
def delete_franchise(franchise_id):
    FranchiseService.delete_franchise(franchise_id)
    return message_response("franchise deleted")


@franchise.route("/<int:franchise_id>/store", methods=["POST"])
@auth_required
def create_store(franchise_id):
    """Adds a store. Allowed for admins and the franchise's own admins."""
    data = request.get_json(silent=True) or {}
    store = FranchiseService.create_store(franchise_id, data.get("name"), g.current_user)
    return jsonify(store.to_dict())


@franchise.route("/<int:franchise_id>/store/<int:store_id>", methods=["DELETE"])
@auth_required
def delete_store(franchise_id, store_id):
    FranchiseService.delete_store(franchise_id, store_id, g.current_user)
    return message_response("store deleted")
