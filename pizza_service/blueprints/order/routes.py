from flask import current_app, g, jsonify, request

from pizza_service.auth import admin_required, auth_required
from pizza_service.services import FactoryError, OrderService
from pizza_service.utils.responses import message_response
from . import order


@order.route("/menu", methods=["GET"])
def get_menu():
    """Returns the pizza menu."""
    return jsonify([item.to_dict() for item in OrderService.get_menu()])


@order.route("/menu", methods=["PUT"])
@admin_required
def add_menu_item():
    """Adds an item to the menu and returns the full menu."""
    OrderService.add_menu_item(request.get_json(silent=True) or {})
    return jsonify([item.to_dict() for item in OrderService.get_menu()])


@order.route("", methods=["GET"])
@auth_required
def get_orders():
    """Returns the caller's orders, one page at a time."""
    page = request.args.get("page", 1, type=int)
    return jsonify(OrderService.get_orders(g.current_user, page))


@order.route("", methods=["POST"])
@auth_required
def create_order():
    """Stores an order and sends it to the pizza factory."""
    new_order = OrderService.add_order(g.current_user, request.get_json(silent=True) or {})
    try:
        result = OrderService.fulfill_order(
            g.current_user,
            new_order,
            factory_url=current_app.config.get("FACTORY_URL", ""),
            api_key=current_app.config.get("FACTORY_API_KEY", ""),
            timeout=current_app.config.get("FACTORY_TIMEOUT_SECONDS", 10.0),
        )
    except FactoryError as e:
        return message_response(str(e), 500, reportUrl=e.report_url)

    return jsonify(
        {"order": new_order.to_dict(), "jwt": result["jwt"], "reportUrl": result["reportUrl"]}
    )
