from __future__ import annotations

import pytest

from cityroots.application.orders import place_order
from cityroots.core.config import EmailConfig
from cityroots.domain.cart import CartLine
from cityroots.domain.checkout import CustomerData, PaymentMetadata
from cityroots.integrations.email_service import EmailService, build_order_summary
from cityroots.repositories.order_repository import MemoryOrderRepository
from cityroots.templates.order_email import (
    format_inr,
    render_order_confirmation_html,
    render_order_confirmation_text,
    render_subject,
)

from conftest import make_address, make_product


class FakeSMTP:
    instances: list["FakeSMTP"] = []

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port
        self.started_tls = False
        self.logged_in: tuple[str, str] | None = None
        self.sent: list = []
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        self.started_tls = True

    def login(self, user, password):
        self.logged_in = (user, password)

    def send_message(self, message):
        self.sent.append(message)


def _config(**overrides) -> EmailConfig:
    data = {"provider": "gmail", "user": "shop@gmail.com", "password": "app-pass", "host": "smtp.gmail.com", "port": 587}
    data.update(overrides)
    return EmailConfig(**data)


def _summary(email: str = "asha@example.com") -> dict:
    repo = MemoryOrderRepository()
    customer = CustomerData(phone="9876543210", name="Asha <Rao>", email=email, is_verified=True)
    placed = place_order(customer, make_address(), [CartLine(make_product("a", price="599"), 2)], repo=repo)
    return build_order_summary(
        placed.order,
        placed.items,
        placed.customer,
        placed.address,
        PaymentMetadata("pay_1", "razorpay", placed.order.order_number),
    )


def test_format_inr_uses_indian_grouping() -> None:
    assert format_inr(1413.64) == "₹1,413.64"
    assert format_inr(123456.5) == "₹1,23,456.50"
    assert format_inr(12345678) == "₹1,23,45,678.00"
    assert format_inr(49, decimals=0) == "₹49"


def test_summary_carries_totals_and_payment() -> None:
    summary = _summary()

    assert summary["totals"] == {"subtotal": 1198.0, "tax": 215.64, "shipping": 0.0, "total": 1413.64}
    assert summary["items"][0]["lineTotal"] == 1198.0
    assert summary["payment"]["paymentId"] == "pay_1"


def test_templates_render_order_details() -> None:
    summary = _summary()

    assert render_subject(summary) == f"Order Confirmation - {summary['orderNumber']} | City Roots"
    assert "₹1,413.64" in render_order_confirmation_text(summary)
    html_body = render_order_confirmation_html(summary)
    assert "Asha &lt;Rao&gt;" in html_body
    assert "Asha <Rao>" not in html_body


@pytest.mark.asyncio
async def test_confirmation_is_sent_over_smtp():
    FakeSMTP.instances.clear()
    service = EmailService(_config(), smtp_factory=FakeSMTP)

    message_id = await service.send_order_confirmation(_summary())

    smtp = FakeSMTP.instances[0]
    assert message_id
    assert smtp.started_tls
    assert smtp.logged_in == ("shop@gmail.com", "app-pass")
    assert smtp.sent[0]["To"] == "asha@example.com"


@pytest.mark.asyncio
async def test_disabled_service_skips_sending():
    FakeSMTP.instances.clear()
    service = EmailService(_config(user="", password=""), smtp_factory=FakeSMTP)

    assert await service.send_order_confirmation(_summary()) is None
    assert FakeSMTP.instances == []


@pytest.mark.asyncio
async def test_customer_without_email_is_skipped():
    FakeSMTP.instances.clear()
    service = EmailService(_config(), smtp_factory=FakeSMTP)

    assert await service.send_order_confirmation(_summary(email="")) is None
    assert FakeSMTP.instances == []
