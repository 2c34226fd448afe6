"""Service for the menu and diner orders, including factory fulfillment."""

import logging
import time
from typing import Any, Dict, List

import requests

from pizza_service.exceptions import NotFoundError, ValidationError
from pizza_service.extensions import db
from pizza_service.metrics import events
from pizza_service.models import DinerOrder, Franchise, MenuItem, OrderItem, Store, User

logger = logging.getLogger(__name__)

ORDERS_PER_PAGE = 10


class FactoryError(Exception):
    """Raised when the pizza factory rejects or cannot be reached for an order."""

    def __init__(self, message, report_url=None):
        super().__init__(message)
        self.report_url = report_url


class OrderService:
    """Service for menu and order business operations."""

    @staticmethod
    def get_menu() -> List[MenuItem]:
        return MenuItem.query.order_by(MenuItem.id.asc()).all()

    @staticmethod
    def add_menu_item(item_data: Dict[str, Any]) -> MenuItem:
        title = item_data.get("title")
        price = item_data.get("price")
        if not title or price is None:
            raise ValidationError("title and price are required")
        try:
            price = float(price)
        except (TypeError, ValueError):
            raise ValidationError("price must be a number")

        item = MenuItem(
            title=title,
            description=item_data.get("description", ""),
            image=item_data.get("image", ""),
            price=price,
        )
        db.session.add(item)
        db.session.commit()
        return item

    @staticmethod
    def get_orders(user: User, page: int = 1) -> Dict[str, Any]:
        page = max(page, 1)
        orders = (
            DinerOrder.query.filter_by(diner_id=user.id)
            .order_by(DinerOrder.id.asc())
            .offset((page - 1) * ORDERS_PER_PAGE)
            .limit(ORDERS_PER_PAGE)
            .all()
        )
        return {
            "dinerId": user.id,
            "orders": [order.to_dict() for order in orders],
            "page": page,
        }

    @staticmethod
    def add_order(user: User, order_data: Dict[str, Any]) -> DinerOrder:
        """
        Persist a diner order.

        Args:
            user: Ordering diner
            order_data: ``{franchiseId, storeId, items: [{menuId, description, price}]}``

        Raises:
            ValidationError: If the order is malformed
            NotFoundError: If the store or a menu item does not exist
        """
        items = order_data.get("items") or []
        franchise_id = order_data.get("franchiseId")
        store_id = order_data.get("storeId")
        if franchise_id is None or store_id is None or not items:
            raise ValidationError("franchiseId, storeId, and items are required")

        if db.session.get(Franchise, franchise_id) is None:
            raise NotFoundError("unknown franchise")
        store = db.session.get(Store, store_id)
        if store is None or store.franchise_id != franchise_id:
            raise NotFoundError("unknown store")

        order = DinerOrder(diner_id=user.id, franchise_id=franchise_id, store_id=store_id)
        for item in items:
            menu_item = db.session.get(MenuItem, item.get("menuId"))
            if menu_item is None:
                raise NotFoundError("unknown menu item")
            order.items.append(
                OrderItem(
                    menu_id=menu_item.id,
                    description=item.get("description", menu_item.description),
                    price=float(item.get("price", menu_item.price)),
                )
            )
        db.session.add(order)
        db.session.commit()
        return order

    @staticmethod
    def fulfill_order(
        user: User,
        order: DinerOrder,
        factory_url: str,
        api_key: str,
        timeout: float = 10.0,
    ) -> Dict[str, Any]:
        """
        Ask the pizza factory to bake an order.

        Records pizza sales and factory latency on success and a creation
        failure otherwise.

        Returns:
            Factory response with ``jwt`` and ``reportUrl``

        Raises:
            FactoryError: If the factory cannot fulfill the order
        """
        payload = {
            "diner": {"id": user.id, "name": user.name, "email": user.email},
            "order": order.to_dict(),
        }
        started = time.perf_counter()
        try:
            response = requests.post(
                f"{factory_url}/api/order",
                json=payload,
                headers={"Authorization": f"Bearer {api_key}"},
                timeout=timeout,
            )
        except requests.RequestException as e:
            OrderService._record_factory_latency(started)
            events.increment("pizzaMetrics_creationFailures")
            logger.error(f"Error contacting pizza factory for order {order.id}: {e}")
            raise FactoryError("Failed to fulfill order at factory")

        OrderService._record_factory_latency(started)
        try:
            body = response.json()
        except ValueError:
            body = {}

        if not response.ok:
            events.increment("pizzaMetrics_creationFailures")
            logger.error(
                f"Pizza factory rejected order {order.id}: {response.status_code}"
            )
            raise FactoryError(
                "Failed to fulfill order at factory", report_url=body.get("reportUrl")
            )

        events.increment("pizzaMetrics_sold", len(order.items))
        events.increment("pizzaMetrics_revenue", order.total)
        return {"jwt": body.get("jwt"), "reportUrl": body.get("reportUrl")}

    @staticmethod
    def _record_factory_latency(started: float) -> None:
        latency_ms = (time.perf_counter() - started) * 1000.0
        events.set_value("latencyMetrics_pizzaCreation", round(latency_ms, 3))
