"""Order history — read side of the Order Ledger for the purchasing user."""

import structlog

from identity.principal import AuthenticatedUser
from ordering.order.order import Order
from ordering.order.repository import OrderRepository
from shared.errors import Unauthorized

logger = structlog.get_logger(__name__)


class OrderHistory:
    def __init__(self, orders: OrderRepository) -> None:
        self.orders = orders

    def list_orders(self, user: AuthenticatedUser) -> list[Order]:
        return self.orders.list_by_user(user.user_id)

    def get_order(self, user: AuthenticatedUser, order_id: str) -> Order:
        order = self.orders.get(order_id)
        try:
            order.assert_owned_by(user.user_id)
        except Unauthorized:
            logger.warning("Order access denied", order_id=order_id, user_id=user.user_id)
            raise
        return order
