from __future__ import annotations

from cityroots.domain.checkout import CheckoutStep
from cityroots.domain.checkout_fsm import ALLOWED_TRANSITIONS, validate_checkout_transition


def _validate(current: str, target: str, *, paid: bool = False):
    return validate_checkout_transition(current_step=current, target_step=target, payment_confirmed=paid)


def test_happy_path_transitions_allowed() -> None:
    assert _validate(CheckoutStep.ADDRESS, CheckoutStep.PAYMENT).allowed
    assert _validate(CheckoutStep.PAYMENT, CheckoutStep.CONFIRMATION, paid=True).allowed


def test_back_edge_from_payment_to_address() -> None:
    assert _validate(CheckoutStep.PAYMENT, CheckoutStep.ADDRESS).allowed


def test_confirmation_requires_payment() -> None:
    result = _validate(CheckoutStep.PAYMENT, CheckoutStep.CONFIRMATION)
    assert not result.allowed
    assert "payment" in result.reason


def test_address_cannot_skip_to_confirmation() -> None:
    assert not _validate(CheckoutStep.ADDRESS, CheckoutStep.CONFIRMATION, paid=True).allowed


def test_confirmation_is_terminal() -> None:
    assert ALLOWED_TRANSITIONS[CheckoutStep.CONFIRMATION] == frozenset()
    for target in CheckoutStep.ORDER:
        assert not _validate(CheckoutStep.CONFIRMATION, target, paid=True).allowed


def test_unknown_step_is_rejected() -> None:
    assert not _validate(CheckoutStep.ADDRESS, "shipping").allowed
    assert not _validate("cart", CheckoutStep.ADDRESS).allowed
