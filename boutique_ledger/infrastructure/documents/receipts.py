"""Receipt values and their HTML rendering for sales, rentals and payments"""

from dataclasses import dataclass, field
from datetime import date, datetime
from html import escape
from typing import List, Optional
from boutique_ledger.domain.models import Client, Payment, Product, Rental, Sale, SALE, RENTAL
from boutique_ledger.domain.balance import rental_days

RECEIPT_TITLES = {
    "sale": "SALE RECEIPT",
    "rental": "RENTAL RECEIPT",
    "payment": "PAYMENT RECEIPT",
}


@dataclass
class ShopDetails:
    """Letterhead printed on every document"""

    name: str
    tagline: str
    phone: str
    currency: str


@dataclass
class ReceiptItem:
    name: str
    quantity: int
    unit_price_cents: int
    total_cents: int


@dataclass
class Receipt:
    """Already-computed values handed to the renderer"""

    id: str
    type: str  # "sale", "rental" or "payment"
    transaction_id: str
    client_name: str
    client_phone: str
    items: List[ReceiptItem]
    total_cents: int
    paid_cents: int
    remaining_cents: int
    created_by: str
    created_at: datetime
    discount_cents: int = 0
    deposit_cents: int = 0
    rental_start: Optional[date] = None
    rental_end: Optional[date] = None
    notes: List[str] = field(default_factory=list)


def format_money(cents: int, currency: str) -> str:
    return f"{cents / 100:,.2f} {currency}"


def sale_receipt(sale: Sale, client: Client, product: Product) -> Receipt:
    return Receipt(
        id=sale.id,
        type=SALE,
        transaction_id=sale.id,
        client_name=client.full_name,
        client_phone=client.phone,
        items=[
            ReceiptItem(
                name=product.name,
                quantity=sale.quantity,
                unit_price_cents=sale.unit_price_cents,
                total_cents=sale.unit_price_cents * sale.quantity,
            )
        ],
        total_cents=sale.total_cents,
        paid_cents=sale.paid_cents,
        remaining_cents=sale.remaining_cents,
        created_by=sale.created_by,
        created_at=sale.created_at,
        discount_cents=sale.discount_cents,
    )


def rental_receipt(rental: Rental, client: Client, product: Product) -> Receipt:
    days = rental_days(rental.start_date, rental.end_date)
    return Receipt(
        id=rental.id,
        type=RENTAL,
        transaction_id=rental.id,
        client_name=client.full_name,
        client_phone=client.phone,
        items=[
            ReceiptItem(
                name=f"{product.name} ({days} day{'s' if days > 1 else ''})",
                quantity=rental.quantity,
                unit_price_cents=rental.daily_rate_cents * days,
                total_cents=rental.total_cents,
            )
        ],
        total_cents=rental.total_cents,
        paid_cents=rental.paid_cents,
        remaining_cents=rental.remaining_cents,
        created_by=rental.created_by,
        created_at=rental.created_at,
        deposit_cents=rental.deposit_cents,
        rental_start=rental.start_date,
        rental_end=rental.end_date,
        notes=[
            "Return items in their original condition",
            "Late returns are billed at the daily rate",
            "Deposit refunded after inspection",
        ],
    )


def payment_receipt(payment: Payment, remaining_cents: int, client: Client, product: Product) -> Receipt:
    """Receipt for a single payment; remaining is the balance after it was applied"""
    return Receipt(
        id=payment.id,
        type="payment",
        transaction_id=payment.transaction_id,
        client_name=client.full_name,
        client_phone=client.phone,
        items=[
            ReceiptItem(
                name=f"Payment - {product.name}",
                quantity=1,
                unit_price_cents=payment.amount_cents,
                total_cents=payment.amount_cents,
            )
        ],
        total_cents=payment.amount_cents,
        paid_cents=payment.amount_cents,
        remaining_cents=remaining_cents,
        created_by=payment.created_by,
        created_at=payment.created_at,
        notes=[f"Method: {payment.method}"],
    )


def _receipt_css() -> str:
    return """
        body { font-family: Helvetica, Arial, sans-serif; font-size: 9pt; width: 72mm; margin: 4mm; }
        h1 { text-align: center; font-size: 14pt; margin: 0; }
        h2 { text-align: center; font-size: 11pt; margin: 6px 0; }
        .center { text-align: center; }
        .amount { text-align: right; }
        table { width: 100%; border-collapse: collapse; }
        td { padding: 2px 0; }
        hr { border: 0; border-top: 1px dashed #000; }
        .settled { text-align: center; font-weight: bold; }
    """


def render_receipt_html(receipt: Receipt, shop: ShopDetails) -> str:
    """Thermal-printer sized receipt as a standalone HTML document"""
    def money(cents: int) -> str:
        return format_money(cents, shop.currency)

    html = f"<html><head><meta charset='UTF-8'><title>{escape(receipt.id)}</title><style>{_receipt_css()}</style></head><body>"
    html += f"<h1>{escape(shop.name)}</h1>"
    html += f"<p class='center'>{escape(shop.tagline)}<br>Tel: {escape(shop.phone)}</p><hr>"
    html += f"<h2>{RECEIPT_TITLES.get(receipt.type, 'RECEIPT')}</h2>"
    html += f"<p>No: {escape(receipt.id[:8].upper())}<br>"
    html += f"Date: {receipt.created_at.strftime('%d/%m/%Y')}<br>"
    html += f"Time: {receipt.created_at.strftime('%H:%M')}</p>"
    html += f"<p><b>CLIENT:</b><br>{escape(receipt.client_name)}<br>Tel: {escape(receipt.client_phone)}</p>"

    if receipt.type == RENTAL and receipt.rental_start and receipt.rental_end:
        days = rental_days(receipt.rental_start, receipt.rental_end)
        html += "<hr><p><b>RENTAL:</b><br>"
        html += f"Start: {receipt.rental_start.strftime('%d/%m/%Y')}<br>"
        html += f"End: {receipt.rental_end.strftime('%d/%m/%Y')}<br>"
        html += f"Duration: {days} day{'s' if days > 1 else ''}</p>"

    html += "<hr><p><b>ITEMS:</b></p><table>"
    for item in receipt.items:
        html += f"<tr><td colspan='2'>{escape(item.name)}</td></tr>"
        html += f"<tr><td>{item.quantity} x {money(item.unit_price_cents)}</td>"
        html += f"<td class='amount'>{money(item.total_cents)}</td></tr>"
    html += "</table><hr><table>"

    if receipt.discount_cents > 0:
        html += f"<tr><td>Discount:</td><td class='amount'>-{money(receipt.discount_cents)}</td></tr>"
    html += f"<tr><td>SUBTOTAL:</td><td class='amount'>{money(receipt.total_cents)}</td></tr>"
    if receipt.deposit_cents > 0:
        html += f"<tr><td>Deposit:</td><td class='amount'>{money(receipt.deposit_cents)}</td></tr>"
    html += f"<tr><td>PAID:</td><td class='amount'>{money(receipt.paid_cents)}</td></tr>"
    if receipt.remaining_cents > 0:
        html += f"<tr><td>REMAINING:</td><td class='amount'>{money(receipt.remaining_cents)}</td></tr>"
    html += "</table>"
    if receipt.remaining_cents <= 0:
        html += "<p class='settled'>*** PAID IN FULL ***</p>"

    if receipt.notes:
        html += "<hr><ul>" + "".join(f"<li>{escape(note)}</li>" for note in receipt.notes) + "</ul>"

    html += f"<hr><p>Seller: {escape(receipt.created_by)}</p>"
    html += "<p class='center'>THANK YOU FOR YOUR VISIT!</p>"
    html += "<p>Client signature:<br>_________________________</p>"
    html += "</body></html>"
    return html
