"""Client debts - /v1/debts"""

from datetime import date, datetime
from typing import Optional
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from boutique_ledger.api.v1.schemas import (
    ClientSchema,
    DebtsResponse,
    DebtSummarySchema,
    DebtTotalsSchema,
    OutstandingItem,
    OutstandingResponse,
)
from boutique_ledger.api.v1.receipts import DocumentFormat, document_response
from boutique_ledger.api.dependencies import get_request_id, get_shop_details
from boutique_ledger.domain.debts import (
    aggregate_client_debts,
    debt_totals,
    filter_debts,
    find_orphaned_transactions,
    list_outstanding,
)
from boutique_ledger.infrastructure.database.session import get_db
from boutique_ledger.infrastructure.database.repositories import (
    ClientRepository,
    ProductRepository,
    RentalRepository,
    SaleRepository,
)
from boutique_ledger.infrastructure.documents.receipts import ShopDetails
from boutique_ledger.infrastructure.documents.reports import render_debts_report_html
from boutique_ledger.infrastructure.observability.logging import log_skipped_rows
from boutique_ledger.infrastructure.observability.metrics import skipped_rows_counter

router = APIRouter()


def _filtered_debts(db: Session, request_id: str, search, start_date, end_date):
    transactions = [*SaleRepository(db).get_all(), *RentalRepository(db).get_all()]
    clients = ClientRepository(db).get_all()

    orphans = find_orphaned_transactions(transactions, clients)
    if orphans:
        skipped_rows_counter.labels(report="debts").inc(len(orphans))
        log_skipped_rows(request_id, "debts", [t.id for t in orphans])

    summaries = filter_debts(aggregate_client_debts(transactions, clients), search, start_date, end_date)
    return summaries, len(orphans)


@router.get("/debts", response_model=DebtsResponse)
def get_debts(
    request: Request,
    search: Optional[str] = Query(None, description="Client name, phone or email"),
    start_date: Optional[date] = Query(None, description="Last transaction on or after"),
    end_date: Optional[date] = Query(None, description="Last transaction on or before"),
    db: Session = Depends(get_db),
):
    """
    Clients with outstanding balances, largest debt first.

    Transactions referencing unknown clients are left out and counted in
    skipped_count.
    """
    summaries, skipped = _filtered_debts(db, get_request_id(request), search, start_date, end_date)

    return DebtsResponse(
        totals=DebtTotalsSchema.model_validate(debt_totals(summaries)),
        debts=[DebtSummarySchema.model_validate(s) for s in summaries],
        skipped_count=skipped,
    )


@router.get("/debts/report")
def get_debts_report(
    request: Request,
    search: Optional[str] = Query(None),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    output: DocumentFormat = Query("html", alias="format"),
    db: Session = Depends(get_db),
    shop: ShopDetails = Depends(get_shop_details),
):
    """Printable debt report with the same filters as GET /v1/debts"""
    summaries, _ = _filtered_debts(db, get_request_id(request), search, start_date, end_date)
    html = render_debts_report_html(summaries, debt_totals(summaries), shop, datetime.now())
    return document_response(html, output, f"debts-{date.today().isoformat()}")


@router.get("/debts/outstanding", response_model=OutstandingResponse)
def get_outstanding(
    search: Optional[str] = Query(None, description="Client name/phone, product name/barcode"),
    db: Session = Depends(get_db),
):
    """Unpaid sales and rentals awaiting collection, newest first"""
    outstanding = list_outstanding(
        [*SaleRepository(db).get_all(), *RentalRepository(db).get_all()],
        ClientRepository(db).get_all(),
        ProductRepository(db).get_all(),
        search=search,
    )

    items = [
        OutstandingItem(
            transaction_id=o.transaction.id,
            kind=o.transaction.kind,
            client=ClientSchema.model_validate(o.client),
            product_name=o.product.name,
            total_cents=o.transaction.total_cents,
            paid_cents=o.transaction.paid_cents,
            remaining_cents=o.transaction.remaining_cents,
            created_by=o.transaction.created_by,
            created_at=o.transaction.created_at,
        )
        for o in outstanding
    ]

    return OutstandingResponse(
        total_remaining_cents=sum(i.remaining_cents for i in items),
        transactions=items,
    )
