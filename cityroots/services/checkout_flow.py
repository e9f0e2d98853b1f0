"""
Checkout flow - address -> payment -> confirmation.

The flow owns one :class:`CheckoutSession` and talks to the cart store and
to injected collaborators (payment gateway, payment verifier, optional auth
gate and address saver). Every step change goes through
:func:`validate_checkout_transition`; nothing outside this class moves the
step.
"""
from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from cityroots.core.constants import CURRENCY, SHOP_REDIRECT_PATH
from cityroots.domain.checkout import (
    AddressData,
    CheckoutSession,
    CheckoutStep,
    CustomerData,
    PaymentMetadata,
    validate_address,
)
from cityroots.domain.checkout_fsm import validate_checkout_transition
from cityroots.integrations.auth import AuthGate
from cityroots.integrations.payments import (
    CheckoutPrefill,
    CreatedPaymentOrder,
    PaymentDismissed,
    PaymentFailed,
    PaymentGateway,
    PaymentSucceeded,
    PaymentVerifier,
)
from cityroots.services.cart_store import CartStore

logger = logging.getLogger(__name__)

AddressSaver = Callable[[AddressData], Awaitable[Any]]

ADDRESS_SAVE_FAILED = "Failed to save address. Please try again."
PAYMENT_INIT_FAILED = "Failed to initiate payment. Please try again."
PAYMENT_VERIFY_FAILED = "Payment verification failed. Please try again."
PAYMENT_FAILED = "Payment failed. Please try again."


@dataclass(frozen=True)
class StepResult:
    ok: bool
    step: str
    error: str | None = None
    redirect_to: str | None = None


class CheckoutFlow:
    def __init__(
        self,
        cart: CartStore,
        gateway: PaymentGateway,
        verifier: PaymentVerifier,
        *,
        auth: AuthGate | None = None,
        save_address: AddressSaver | None = None,
        currency: str = CURRENCY,
    ):
        self._cart = cart
        self._gateway = gateway
        self._verifier = verifier
        self._auth = auth
        self._save_address = save_address
        self._currency = currency
        self.session = CheckoutSession()
        self.started = False

    # ------------------------------------------------------------------
    # state helpers
    # ------------------------------------------------------------------

    @property
    def step(self) -> str:
        return self.session.step

    @property
    def error(self) -> str | None:
        return self.session.error

    @property
    def loading(self) -> bool:
        return self.session.loading

    def _result(self, ok: bool, redirect_to: str | None = None) -> StepResult:
        return StepResult(ok, self.session.step, self.session.error, redirect_to)

    def _fail(self, message: str) -> StepResult:
        self.session.error = message
        self.session.loading = False
        return self._result(False)

    def _move_to(self, target: str, *, payment_confirmed: bool = False) -> bool:
        check = validate_checkout_transition(
            current_step=self.session.step,
            target_step=target,
            payment_confirmed=payment_confirmed,
        )
        if not check.allowed:
            logger.warning("Checkout transition refused: %s", check.reason)
            self.session.error = check.reason
            return False
        logger.debug("Checkout %s -> %s", self.session.step, target)
        self.session.step = target
        self.session.error = None
        return True

    def _summary(self) -> dict[str, Any]:
        totals = self._cart.snapshot_totals()
        return {
            "customer": self.session.customer.to_dict() if self.session.customer else None,
            "address": self.session.address.to_dict() if self.session.address else None,
            "items": [line.to_dict() for line in self._cart.lines],
            "totals": totals.to_dict(),
        }

    # ------------------------------------------------------------------
    # operations
    # ------------------------------------------------------------------

    async def start(self) -> StepResult:
        """Enter checkout; an empty cart redirects back to the shop."""
        if self._cart.is_empty() and self.session.step != CheckoutStep.CONFIRMATION:
            logger.info("Checkout opened with an empty cart, redirecting")
            return self._result(False, redirect_to=SHOP_REDIRECT_PATH)

        if self._auth is not None and not self.started:

            async def _mark_started() -> None:
                self.started = True

            if not await self._auth.require_auth(_mark_started):
                return self._result(False)
        self.started = True
        return self._result(True)

    async def submit_address(self, address: AddressData) -> StepResult:
        if self.session.step != CheckoutStep.ADDRESS:
            return self._fail(f"Cannot submit an address at step '{self.session.step}'")

        error = validate_address(address)
        if error:
            return self._fail(error)

        if self._save_address is not None:
            self.session.loading = True
            try:
                await self._save_address(address)
            except Exception as e:
                logger.error(f"Error saving address: {e}")
                return self._fail(ADDRESS_SAVE_FAILED)
            finally:
                self.session.loading = False

        self.session.address = address
        self.session.customer = CustomerData.from_address(address)
        self._move_to(CheckoutStep.PAYMENT)
        return self._result(True)

    def back_to_address(self) -> StepResult:
        ok = self._move_to(CheckoutStep.ADDRESS)
        return self._result(ok)

    async def pay(self) -> StepResult:
        if self.session.step != CheckoutStep.PAYMENT:
            return self._fail(f"Cannot pay at step '{self.session.step}'")
        if self._cart.is_empty():
            return self._fail("Your cart is empty")

        customer = self.session.customer
        totals = self._cart.snapshot_totals()
        summary = self._summary()
        self.session.error = None
        self.session.loading = True

        try:
            order = await self._gateway.create_order(
                totals.amount_in_paise,
                self._currency,
                {
                    "customer": customer,
                    "address": self.session.address,
                    "lines": self._cart.lines,
                    "summary": summary,
                },
            )
        except Exception as e:
            logger.error(f"Error creating payment order: {e}")
            return self._fail(PAYMENT_INIT_FAILED)

        prefill = CheckoutPrefill(
            name=customer.name if customer else "",
            contact=customer.phone if customer else "",
            email=customer.email if customer else "",
        )
        try:
            outcome = await self._gateway.open_checkout(order, prefill)
        except Exception as e:
            logger.error(f"Checkout window failed for {order.order_number}: {e}")
            return self._fail(PAYMENT_INIT_FAILED)

        if isinstance(outcome, PaymentSucceeded):
            return await self._confirm(outcome, order, summary)
        if isinstance(outcome, PaymentFailed):
            logger.info("Payment failed for %s: %s", order.order_number, outcome.reason)
            return self._fail(outcome.reason or PAYMENT_FAILED)
        if isinstance(outcome, PaymentDismissed):
            logger.info("Checkout dismissed for %s", order.order_number)
            self.session.loading = False
            return self._result(False)

        logger.error("Unexpected payment outcome %r", outcome)
        return self._fail(PAYMENT_FAILED)

    async def _confirm(
        self,
        success: PaymentSucceeded,
        order: CreatedPaymentOrder,
        summary: dict[str, Any],
    ) -> StepResult:
        try:
            verification = await self._verifier.verify(success, order, summary)
        except Exception as e:
            logger.error(f"Payment verification error for {order.order_number}: {e}")
            return self._fail(PAYMENT_VERIFY_FAILED)

        if not verification.ok:
            return self._fail(verification.message or PAYMENT_VERIFY_FAILED)

        self._cart.clear()
        self.session.order_id = verification.order_id or order.order_id
        self.session.payment = PaymentMetadata(
            payment_id=success.payment_id,
            method="razorpay",
            order_number=order.order_number,
        )
        self.session.loading = False
        self._move_to(CheckoutStep.CONFIRMATION, payment_confirmed=True)
        logger.info("Order %s confirmed", order.order_number)
        return self._result(True)
