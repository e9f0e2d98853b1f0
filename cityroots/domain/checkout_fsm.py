"""Checkout step transition rules (single source of truth)."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from cityroots.domain.checkout import CheckoutStep

ALLOWED_TRANSITIONS: Mapping[str, frozenset[str]] = {
    CheckoutStep.ADDRESS: frozenset({CheckoutStep.PAYMENT}),
    CheckoutStep.PAYMENT: frozenset(
        {
            CheckoutStep.CONFIRMATION,
            CheckoutStep.ADDRESS,
        }
    ),
    CheckoutStep.CONFIRMATION: frozenset(),
}

TERMINAL_STEPS = frozenset({CheckoutStep.CONFIRMATION})


@dataclass(frozen=True, slots=True)
class TransitionValidationResult:
    allowed: bool
    reason: str | None = None


def validate_checkout_transition(
    *,
    current_step: str,
    target_step: str,
    payment_confirmed: bool = False,
) -> TransitionValidationResult:
    """Validate the transition matrix plus the payment guard on confirmation."""
    if target_step not in ALLOWED_TRANSITIONS:
        return TransitionValidationResult(False, f"Unsupported checkout step: {target_step}")

    if current_step not in ALLOWED_TRANSITIONS:
        return TransitionValidationResult(False, f"Unsupported current step: {current_step}")

    if current_step in TERMINAL_STEPS:
        return TransitionValidationResult(False, f"Checkout already finished at '{current_step}'.")

    if target_step not in ALLOWED_TRANSITIONS[current_step]:
        return TransitionValidationResult(
            False,
            f"Transition '{current_step} -> {target_step}' is not allowed.",
        )

    if target_step == CheckoutStep.CONFIRMATION and not payment_confirmed:
        return TransitionValidationResult(
            False,
            "Order cannot be confirmed before the payment succeeds.",
        )

    return TransitionValidationResult(True)
