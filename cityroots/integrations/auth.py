"""Authentication collaborator contract.

Sign-in itself (Firebase Auth in the web client) lives outside this package;
cart and checkout code only depend on this protocol.
"""
from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Protocol


@dataclass(frozen=True)
class AuthUser:
    uid: str
    email: str | None = None
    display_name: str | None = None


class AuthGate(Protocol):
    @property
    def current_user(self) -> AuthUser | None:
        ...

    async def require_auth(self, callback: Callable[[], Awaitable[Any]]) -> bool:
        """Run ``callback`` now if signed in, otherwise after a successful
        sign-in prompt. Returns whether the callback ran."""
        ...


async def run_authenticated(auth: AuthGate | None, action: Callable[[], Any]) -> bool:
    """Run ``action`` behind ``auth.require_auth``; without a gate it runs directly."""
    if auth is None:
        action()
        return True

    async def _run() -> None:
        action()

    return await auth.require_auth(_run)
