"""Order records: customers, addresses, orders, items, tracking, payments."""
from __future__ import annotations

from typing import Any, Protocol

from cityroots.core.exceptions import OrderNotFoundException
from cityroots.domain.order import (
    Address,
    Customer,
    Order,
    OrderItem,
    Payment,
    TrackingEvent,
)


class OrderRepository(Protocol):
    def get_customer_by_phone(self, phone: str) -> Customer | None:
        ...

    def create_customer(self, customer: Customer) -> Customer:
        ...

    def verify_customer(self, phone: str, name: str | None, email: str | None) -> Customer:
        ...

    def create_address(self, address: Address) -> Address:
        ...

    def get_address(self, address_id: str) -> Address | None:
        ...

    def create_order(self, order: Order) -> Order:
        ...

    def get_order(self, order_id: str) -> Order | None:
        ...

    def get_order_by_number(self, order_number: str) -> Order | None:
        ...

    def get_order_by_gateway_id(self, gateway_order_id: str) -> Order | None:
        ...

    def update_order(self, order_id: str, **changes: Any) -> Order:
        ...

    def create_order_item(self, item: OrderItem) -> OrderItem:
        ...

    def get_order_items(self, order_id: str) -> list[OrderItem]:
        ...

    def create_tracking(self, event: TrackingEvent) -> TrackingEvent:
        ...

    def get_tracking(self, order_id: str) -> list[TrackingEvent]:
        ...

    def create_payment(self, payment: Payment) -> Payment:
        ...

    def get_customer(self, customer_id: str) -> Customer | None:
        ...


class MemoryOrderRepository:
    """Dictionary-backed repository; state lives as long as the process."""

    def __init__(self) -> None:
        self._customers: dict[str, Customer] = {}
        self._addresses: dict[str, Address] = {}
        self._orders: dict[str, Order] = {}
        self._items: dict[str, list[OrderItem]] = {}
        self._tracking: dict[str, list[TrackingEvent]] = {}
        self._payments: dict[str, Payment] = {}

    # customers -----------------------------------------------------------

    def get_customer(self, customer_id: str) -> Customer | None:
        return self._customers.get(customer_id)

    def get_customer_by_phone(self, phone: str) -> Customer | None:
        for customer in self._customers.values():
            if customer.phone == phone:
                return customer
        return None

    def create_customer(self, customer: Customer) -> Customer:
        self._customers[customer.id] = customer
        return customer

    def verify_customer(self, phone: str, name: str | None, email: str | None) -> Customer:
        customer = self.get_customer_by_phone(phone)
        if customer is None:
            customer = self.create_customer(Customer(phone=phone, name=name or f"User {phone[-4:]}"))
        if name:
            customer.name = name
        if email:
            customer.email = email
        customer.is_verified = True
        return customer

    # addresses -----------------------------------------------------------

    def create_address(self, address: Address) -> Address:
        self._addresses[address.id] = address
        return address

    def get_address(self, address_id: str) -> Address | None:
        return self._addresses.get(address_id)

    # orders --------------------------------------------------------------

    def create_order(self, order: Order) -> Order:
        self._orders[order.id] = order
        return order

    def get_order(self, order_id: str) -> Order | None:
        return self._orders.get(order_id)

    def get_order_by_number(self, order_number: str) -> Order | None:
        for order in self._orders.values():
            if order.order_number == order_number:
                return order
        return None

    def get_order_by_gateway_id(self, gateway_order_id: str) -> Order | None:
        for order in self._orders.values():
            if order.razorpay_order_id == gateway_order_id:
                return order
        return None

    def update_order(self, order_id: str, **changes: Any) -> Order:
        order = self._orders.get(order_id)
        if order is None:
            raise OrderNotFoundException(order_id)
        for field_name, value in changes.items():
            if not hasattr(order, field_name):
                raise AttributeError(f"Order has no field {field_name!r}")
            setattr(order, field_name, value)
        order.touch()
        return order

    def create_order_item(self, item: OrderItem) -> OrderItem:
        self._items.setdefault(item.order_id, []).append(item)
        return item

    def get_order_items(self, order_id: str) -> list[OrderItem]:
        return list(self._items.get(order_id, []))

    # tracking & payments -------------------------------------------------

    def create_tracking(self, event: TrackingEvent) -> TrackingEvent:
        self._tracking.setdefault(event.order_id, []).append(event)
        return event

    def get_tracking(self, order_id: str) -> list[TrackingEvent]:
        return sorted(self._tracking.get(order_id, []), key=lambda event: event.timestamp)

    def create_payment(self, payment: Payment) -> Payment:
        self._payments[payment.id] = payment
        return payment

    def get_payments(self, order_id: str) -> list[Payment]:
        return [p for p in self._payments.values() if p.order_id == order_id]
