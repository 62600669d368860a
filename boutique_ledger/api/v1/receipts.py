"""GET /v1/receipts/{kind}/{id} - printable receipts"""

from typing import Literal
from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session
from starlette.responses import Response

from boutique_ledger.api.dependencies import get_shop_details
from boutique_ledger.domain.balance import remaining_after_payment
from boutique_ledger.domain.models import SALE, RENTAL
from boutique_ledger.infrastructure.database.session import get_db
from boutique_ledger.infrastructure.database.repositories import (
    ClientRepository,
    PaymentRepository,
    ProductRepository,
    RentalRepository,
    SaleRepository,
)
from boutique_ledger.infrastructure.documents.receipts import (
    ShopDetails,
    payment_receipt,
    rental_receipt,
    render_receipt_html,
    sale_receipt,
)
from boutique_ledger.infrastructure.documents.pdf import render_pdf

router = APIRouter()

DocumentFormat = Literal["html", "pdf"]


def document_response(html: str, output: str, filename: str) -> Response:
    """Serve a rendered document as HTML or as a downloadable PDF"""
    if output == "pdf":
        return Response(
            content=render_pdf(html),
            media_type="application/pdf",
            headers={"Content-Disposition": f'attachment; filename="{filename}.pdf"'},
        )
    return HTMLResponse(content=html)


@router.get("/receipts/{kind}/{record_id}")
def get_receipt(
    kind: Literal["sale", "rental", "payment"],
    record_id: str,
    output: DocumentFormat = Query("html", alias="format"),
    db: Session = Depends(get_db),
    shop: ShopDetails = Depends(get_shop_details),
):
    """
    Render the receipt of a sale, rental or payment.

    Payment receipts show the balance as it stood right after that payment,
    rebuilt from the transaction's payment ledger.
    """
    payment = None
    if kind == "payment":
        payment = PaymentRepository(db).get(record_id)
        if not payment:
            raise HTTPException(status_code=404, detail="Payment not found")
        txn_kind, txn_id = payment.transaction_kind, payment.transaction_id
    else:
        txn_kind, txn_id = kind, record_id

    repo = SaleRepository(db) if txn_kind == SALE else RentalRepository(db)
    transaction = repo.get(txn_id)
    if not transaction:
        raise HTTPException(status_code=404, detail=f"{txn_kind.capitalize()} not found")

    client = ClientRepository(db).get(transaction.client_id)
    product = ProductRepository(db).get(transaction.product_id)
    if not client or not product:
        raise HTTPException(status_code=404, detail="Client or product of this transaction no longer exists")

    if payment is not None:
        remaining = remaining_after_payment(
            transaction.remaining_cents,
            PaymentRepository(db).get_for_transaction(transaction.id),
            payment.id,
        )
        receipt = payment_receipt(payment, remaining, client, product)
    elif txn_kind == RENTAL:
        receipt = rental_receipt(transaction, client, product)
    else:
        receipt = sale_receipt(transaction, client, product)

    return document_response(render_receipt_html(receipt, shop), output, f"receipt-{receipt.id[:8]}")
