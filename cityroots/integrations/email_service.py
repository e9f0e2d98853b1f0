"""Transactional e-mail over SMTP.

The storefront only assembles the order summary; rendering lives in
:mod:`cityroots.templates.order_email` and delivery happens here.
"""
from __future__ import annotations

import asyncio
import logging
import smtplib
from collections.abc import Iterable
from email.message import EmailMessage
from email.utils import make_msgid
from typing import Any

from cityroots.core.config import EmailConfig
from cityroots.domain.checkout import PaymentMetadata
from cityroots.domain.order import Address, Customer, Order, OrderItem
from cityroots.templates.order_email import (
    render_order_confirmation_html,
    render_order_confirmation_text,
    render_subject,
)

logger = logging.getLogger(__name__)


def build_order_summary(
    order: Order,
    items: Iterable[OrderItem],
    customer: Customer,
    address: Address,
    payment: PaymentMetadata | None = None,
) -> dict[str, Any]:
    """Assemble the summary object handed to the e-mail collaborator."""
    return {
        "orderId": order.id,
        "orderNumber": order.order_number,
        "orderDate": order.created_at.strftime("%d/%m/%Y"),
        "customer": {"name": customer.name, "email": customer.email, "phone": customer.phone},
        "address": address.to_dict(),
        "items": [
            {
                "productId": item.product_id,
                "name": item.product_name,
                "price": float(item.product_price),
                "quantity": item.quantity,
                "lineTotal": float(item.total_price),
            }
            for item in items
        ],
        "totals": {
            "subtotal": float(order.subtotal),
            "tax": float(order.tax),
            "shipping": float(order.shipping),
            "total": float(order.total),
        },
        "payment": payment.to_dict() if payment else None,
    }


class EmailService:
    """Sends order confirmations; a no-op when SMTP credentials are missing."""

    def __init__(self, config: EmailConfig, smtp_factory: Any = smtplib.SMTP):
        self._config = config
        self._smtp_factory = smtp_factory

    @property
    def enabled(self) -> bool:
        return self._config.enabled

    def build_message(self, summary: dict[str, Any]) -> EmailMessage:
        recipient = summary["customer"]["email"]
        message = EmailMessage()
        message["Subject"] = render_subject(summary)
        message["From"] = self._config.from_address
        message["To"] = recipient
        message["Reply-To"] = self._config.reply_to
        message["Message-ID"] = make_msgid(domain="cityroots.com")
        message.set_content(render_order_confirmation_text(summary))
        message.add_alternative(render_order_confirmation_html(summary), subtype="html")
        return message

    def _send_sync(self, message: EmailMessage) -> None:
        with self._smtp_factory(self._config.host, self._config.port, timeout=30) as smtp:
            smtp.starttls()
            smtp.login(self._config.user, self._config.password)
            smtp.send_message(message)

    async def send_order_confirmation(self, summary: dict[str, Any]) -> str | None:
        """Send the confirmation; returns the Message-ID or None when skipped."""
        recipient = (summary.get("customer") or {}).get("email")
        if not recipient:
            logger.info("Order %s has no customer e-mail, skipping", summary.get("orderNumber"))
            return None
        if not self.enabled:
            logger.info("E-mail disabled, not sending confirmation for %s", summary["orderNumber"])
            return None

        message = self.build_message(summary)
        await asyncio.to_thread(self._send_sync, message)
        logger.info("Order confirmation %s sent to %s", summary["orderNumber"], recipient)
        return message["Message-ID"]
