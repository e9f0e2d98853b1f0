"""Order read models and post-payment notifications."""
from __future__ import annotations

import logging
from typing import Any

from cityroots.core.exceptions import OrderNotFoundException
from cityroots.core.sentry_integration import capture_exception
from cityroots.domain.checkout import PaymentMetadata
from cityroots.domain.order import Order
from cityroots.integrations.email_service import EmailService, build_order_summary
from cityroots.repositories.order_repository import OrderRepository

logger = logging.getLogger(__name__)


class OrderService:
    def __init__(self, repo: OrderRepository, email: EmailService | None = None):
        self.repo = repo
        self._email = email

    def get_order_details(self, order_id: str) -> dict[str, Any]:
        order = self.repo.get_order(order_id)
        if order is None:
            raise OrderNotFoundException(order_id)
        return self._details(order)

    def get_tracking(self, order_number: str) -> dict[str, Any]:
        order = self.repo.get_order_by_number(order_number)
        if order is None:
            raise OrderNotFoundException(order_number)
        return {
            "order": order.to_dict(),
            "tracking": [event.to_dict() for event in self.repo.get_tracking(order.id)],
        }

    def _details(self, order: Order) -> dict[str, Any]:
        customer = self.repo.get_customer(order.customer_id)
        address = self.repo.get_address(order.shipping_address_id)
        return {
            "order": order.to_dict(),
            "customer": customer.to_dict() if customer else None,
            "address": address.to_dict() if address else None,
            "items": [item.to_dict() for item in self.repo.get_order_items(order.id)],
            "tracking": [event.to_dict() for event in self.repo.get_tracking(order.id)],
        }

    def build_summary(self, order: Order, payment: PaymentMetadata | None = None) -> dict[str, Any] | None:
        customer = self.repo.get_customer(order.customer_id)
        address = self.repo.get_address(order.shipping_address_id)
        if customer is None or address is None:
            logger.warning("Order %s is missing customer or address records", order.order_number)
            return None
        return build_order_summary(order, self.repo.get_order_items(order.id), customer, address, payment)

    async def notify_paid(self, order: Order, payment: PaymentMetadata | None = None) -> str | None:
        """Send the confirmation e-mail; failures are logged, never raised."""
        if self._email is None:
            return None
        summary = self.build_summary(order, payment)
        if summary is None:
            return None
        try:
            return await self._email.send_order_confirmation(summary)
        except Exception as e:
            logger.error(f"Failed to send confirmation for {order.order_number}: {e}")
            capture_exception(e, order_number=order.order_number)
            return None
