"""Phone verification with a fixed demo one-time code.

No SMS provider is wired; the code is returned in the response so the web
client can show it.
"""
from __future__ import annotations

import hmac
import logging
import re
from dataclasses import dataclass

from cityroots.core.constants import DEMO_OTP_CODE
from cityroots.core.exceptions import ValidationException
from cityroots.domain.order import Customer
from cityroots.repositories.order_repository import OrderRepository

logger = logging.getLogger(__name__)

# Indian mobile numbers start with 6-9
MOBILE_PATTERN = re.compile(r"^[6-9]\d{9}$")


@dataclass
class OtpChallenge:
    customer: Customer
    otp: str


class OtpService:
    def __init__(self, repo: OrderRepository, code: str = DEMO_OTP_CODE):
        self._repo = repo
        self._code = code

    def request_code(self, phone: str | None) -> OtpChallenge:
        if not phone:
            raise ValidationException("Phone number is required")
        if not MOBILE_PATTERN.match(phone):
            raise ValidationException("Invalid phone number format")

        customer = self._repo.get_customer_by_phone(phone)
        if customer is None:
            customer = self._repo.create_customer(Customer(phone=phone, name=f"User {phone[-4:]}"))
            logger.info("Created customer %s for phone verification", customer.id)
        return OtpChallenge(customer=customer, otp=self._code)

    def verify_code(
        self,
        phone: str | None,
        otp: str | None,
        name: str | None = None,
        email: str | None = None,
    ) -> Customer:
        if not phone or not otp:
            raise ValidationException("Phone number and OTP are required")
        if not hmac.compare_digest(str(otp).encode(), self._code.encode()):
            raise ValidationException("Invalid OTP")
        return self._repo.verify_customer(phone, name, email)
