"""Order confirmation e-mail templates."""
from __future__ import annotations

import html
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

SUPPORT_EMAIL = "help@cityroots.com"
SUPPORT_PHONE = "+91 12345XXXX"

_STYLE = """
body { font-family: 'Segoe UI', Tahoma, Geneva, Verdana, sans-serif; line-height: 1.6;
       color: #333; max-width: 600px; margin: 0 auto; padding: 20px; background: #f8f9fa; }
.container { background: white; border-radius: 10px; padding: 30px; }
.header { text-align: center; border-bottom: 3px solid #22c55e; padding-bottom: 20px; }
.logo { font-size: 28px; font-weight: bold; color: #22c55e; }
.order-number { background: #22c55e; color: white; padding: 10px 20px; border-radius: 25px;
                display: inline-block; font-weight: bold; }
.section-title { font-size: 18px; font-weight: bold; color: #22c55e;
                 border-left: 4px solid #22c55e; padding-left: 10px; }
.items-table { width: 100%; border-collapse: collapse; }
.items-table th, .items-table td { border: 1px solid #ddd; padding: 12px; text-align: left; }
.items-table th { background-color: #22c55e; color: white; }
.total-final { font-size: 20px; font-weight: bold; color: #22c55e; }
.footer { text-align: center; margin-top: 30px; color: #666; }
"""


def format_inr(amount: Any, decimals: int = 2) -> str:
    """Format an amount with Indian digit grouping, e.g. ``₹1,23,456.50``."""
    value = Decimal(str(amount or 0))
    exponent = Decimal(1).scaleb(-decimals)
    value = value.quantize(exponent, rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    whole, _, fraction = f"{abs(value):.{decimals}f}".partition(".")

    if len(whole) > 3:
        head, tail = whole[:-3], whole[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        whole = ",".join(groups + [tail])

    return f"{sign}₹{whole}.{fraction}" if decimals else f"{sign}₹{whole}"


def _e(value: Any) -> str:
    return html.escape(str(value or ""))


def render_subject(summary: dict[str, Any]) -> str:
    return f"Order Confirmation - {summary['orderNumber']} | City Roots"


def _address_lines(address: dict[str, Any]) -> list[str]:
    lines = [address.get("fullName", ""), address.get("addressLine1", "")]
    if address.get("addressLine2"):
        lines.append(address["addressLine2"])
    lines.append(
        f"{address.get('city', '')}, {address.get('state', '')} - {address.get('postalCode', '')}"
    )
    lines.append(address.get("country", ""))
    return [line for line in lines if line]


def render_order_confirmation_text(summary: dict[str, Any]) -> str:
    customer = summary.get("customer", {})
    lines = [
        f"Hi {customer.get('name', '')},",
        "",
        "Thank you for shopping with City Roots! Your order is confirmed.",
        "",
        f"Order number: {summary['orderNumber']}",
        f"Order date: {summary.get('orderDate', '')}",
        "",
        "Items:",
    ]
    for item in summary.get("items", []):
        lines.append(
            f"  {item['name']} x {item['quantity']}  {format_inr(item['lineTotal'])}"
        )
    totals = summary.get("totals", {})
    shipping = totals.get("shipping", 0)
    lines += [
        "",
        f"Subtotal: {format_inr(totals.get('subtotal'))}",
        f"Tax (18%): {format_inr(totals.get('tax'))}",
        f"Shipping: {'Free' if not shipping else format_inr(shipping)}",
        f"Total: {format_inr(totals.get('total'))}",
        "",
        "Delivering to:",
    ]
    lines += [f"  {line}" for line in _address_lines(summary.get("address", {}))]
    payment = summary.get("payment") or {}
    lines += [
        "",
        f"Payment: {payment.get('paymentMethod', 'Razorpay')} ({payment.get('paymentId', 'N/A')})",
        "",
        f"Questions? Write to {SUPPORT_EMAIL} or call {SUPPORT_PHONE}.",
    ]
    return "\n".join(lines)


def render_order_confirmation_html(summary: dict[str, Any]) -> str:
    customer = summary.get("customer", {})
    totals = summary.get("totals", {})
    payment = summary.get("payment") or {}
    shipping = totals.get("shipping", 0)

    rows = "".join(
        "<tr>"
        f"<td>{_e(item['name'])}</td>"
        f"<td>{_e(item['quantity'])}</td>"
        f"<td>{_e(format_inr(item['price']))}</td>"
        f"<td>{_e(format_inr(item['lineTotal']))}</td>"
        "</tr>"
        for item in summary.get("items", [])
    )
    address_html = "<br>".join(_e(line) for line in _address_lines(summary.get("address", {})))

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<title>Order Confirmation - City Roots</title>
<style>{_STYLE}</style>
</head>
<body>
<div class="container">
  <div class="header">
    <div class="logo">City Roots</div>
    <p>Thank you for your order, {_e(customer.get('name'))}!</p>
    <div class="order-number">Order #{_e(summary['orderNumber'])}</div>
    <p>Placed on {_e(summary.get('orderDate'))}</p>
  </div>
  <div class="section">
    <div class="section-title">Customer</div>
    <p>{_e(customer.get('name'))}<br>{_e(customer.get('email'))}<br>{_e(customer.get('phone'))}</p>
  </div>
  <div class="section">
    <div class="section-title">Delivery Address</div>
    <p>{address_html}</p>
  </div>
  <div class="section">
    <div class="section-title">Items</div>
    <table class="items-table">
      <tr><th>Product</th><th>Qty</th><th>Price</th><th>Total</th></tr>
      {rows}
    </table>
  </div>
  <div class="section">
    <p>Subtotal: {_e(format_inr(totals.get('subtotal')))}</p>
    <p>Tax (18%): {_e(format_inr(totals.get('tax')))}</p>
    <p>Shipping: {'Free' if not shipping else _e(format_inr(shipping))}</p>
    <p class="total-final">Total: {_e(format_inr(totals.get('total')))}</p>
  </div>
  <div class="section">
    <div class="section-title">Payment</div>
    <p>{_e(payment.get('paymentMethod', 'Razorpay'))} &middot; {_e(payment.get('paymentId', 'N/A'))}</p>
  </div>
  <div class="footer">
    <p>Questions? {_e(SUPPORT_EMAIL)} &middot; {_e(SUPPORT_PHONE)}</p>
  </div>
</div>
</body>
</html>
"""
