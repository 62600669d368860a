"""Payment collection - /v1/payments"""

import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from boutique_ledger.api.v1.schemas import PaymentCreate, PaymentResponse, PaymentSchema
from boutique_ledger.api.dependencies import get_request_id
from boutique_ledger.domain.balance import apply_payment
from boutique_ledger.domain.exceptions import ConcurrentUpdateError, InvalidAmount, InvalidPaymentMethod
from boutique_ledger.domain.models import SALE
from boutique_ledger.infrastructure.database.session import get_db
from boutique_ledger.infrastructure.database.repositories import (
    PaymentRepository,
    RentalRepository,
    SaleRepository,
)
from boutique_ledger.infrastructure.observability.metrics import payment_rejections_counter, record_payment
from boutique_ledger.infrastructure.observability.logging import log_payment

router = APIRouter()


@router.post("/payments", response_model=PaymentResponse, status_code=201)
def create_payment(request_body: PaymentCreate, request: Request, db: Session = Depends(get_db)):
    """
    Apply a payment to a sale or rental.

    Flow:
    1. Load the transaction
    2. Validate the amount against its remaining balance
    3. Write payment + new balance as one unit (compare-and-set on paid amount)
    4. Commit, record metrics and logs
    """
    request_id = get_request_id(request)

    repo = SaleRepository(db) if request_body.transaction_kind == SALE else RentalRepository(db)
    transaction = repo.get(request_body.transaction_id)
    if not transaction:
        payment_rejections_counter.labels(reason="not_found").inc()
        raise HTTPException(status_code=404, detail=f"{request_body.transaction_kind.capitalize()} not found")

    try:
        application = apply_payment(
            transaction,
            request_body.amount_cents,
            method=request_body.method,
            created_by=request_body.created_by,
        )
        PaymentRepository(db).record(application, expected_paid_cents=transaction.paid_cents)
        db.commit()

    except InvalidAmount as e:
        db.rollback()
        payment_rejections_counter.labels(reason="invalid_amount").inc()
        logging.warning(f"Payment rejected: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    except InvalidPaymentMethod as e:
        db.rollback()
        payment_rejections_counter.labels(reason="invalid_method").inc()
        logging.warning(f"Payment rejected: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    except ConcurrentUpdateError as e:
        db.rollback()
        payment_rejections_counter.labels(reason="conflict").inc()
        logging.warning(f"Payment conflict: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=409, detail=str(e))

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error recording payment: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    updated = application.transaction
    record_payment(updated.kind, application.payment.method, application.payment.amount_cents)
    log_payment(
        request_id,
        updated.id,
        updated.kind,
        application.payment.amount_cents,
        updated.remaining_cents,
        updated.status,
    )

    return PaymentResponse(
        payment=PaymentSchema.model_validate(application.payment),
        paid_cents=updated.paid_cents,
        remaining_cents=updated.remaining_cents,
        status=updated.status,
    )


@router.get("/payments", response_model=List[PaymentSchema])
def list_payments(
    transaction_id: Optional[str] = Query(None, description="Only payments for this sale or rental"),
    db: Session = Depends(get_db),
):
    repo = PaymentRepository(db)
    payments = repo.get_for_transaction(transaction_id) if transaction_id else repo.get_all()
    return [PaymentSchema.model_validate(p) for p in payments]
