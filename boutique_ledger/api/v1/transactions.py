"""Sales and rentals - /v1/sales, /v1/rentals"""

import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from boutique_ledger.api.v1.schemas import RentalCreate, RentalSchema, SaleCreate, SaleSchema
from boutique_ledger.api.dependencies import get_request_id
from boutique_ledger.domain.balance import create_rental, create_sale, return_rental
from boutique_ledger.domain.exceptions import (
    InsufficientStock,
    InvalidAmount,
    InvalidRentalState,
    MissingReference,
    TransactionHasPayments,
)
from boutique_ledger.infrastructure.database.session import get_db
from boutique_ledger.infrastructure.database.repositories import (
    ClientRepository,
    ProductRepository,
    RentalRepository,
    SaleRepository,
)
from boutique_ledger.infrastructure.observability.metrics import transactions_created_counter

router = APIRouter()


def _load_parties(db: Session, client_id: str, product_id: str):
    try:
        return ClientRepository(db).require(client_id), ProductRepository(db).require(product_id)
    except MissingReference as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/sales", response_model=SaleSchema, status_code=201)
def create_sale_endpoint(request_body: SaleCreate, request: Request, db: Session = Depends(get_db)):
    """
    Record a sale at the product's list price.

    Flow:
    1. Resolve client and product
    2. Compute total, balance and status against the stock just read
    3. Insert the sale and take its units out of stock in one commit;
       the stock UPDATE refuses to go below zero
    """
    request_id = get_request_id(request)
    client, product = _load_parties(db, request_body.client_id, request_body.product_id)

    try:
        sale, _ = create_sale(
            client,
            product,
            quantity=request_body.quantity,
            paid_cents=request_body.paid_cents,
            discount_cents=request_body.discount_cents,
            created_by=request_body.created_by,
        )
        SaleRepository(db).save(sale)
        ProductRepository(db).adjust_stock(product.id, -sale.quantity)
        db.commit()

    except (InvalidAmount, InsufficientStock) as e:
        db.rollback()
        logging.warning(f"Sale rejected: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error creating sale: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    transactions_created_counter.labels(kind=sale.kind).inc()
    logging.info("Sale created", extra={"request_id": request_id, "sale_id": sale.id, "total_cents": sale.total_cents})
    return SaleSchema.model_validate(sale)


@router.get("/sales", response_model=List[SaleSchema])
def list_sales(db: Session = Depends(get_db)):
    return [SaleSchema.model_validate(s) for s in SaleRepository(db).get_all()]


@router.delete("/sales/{sale_id}", status_code=204)
def delete_sale(sale_id: str, db: Session = Depends(get_db)):
    """Delete a sale nobody has paid anything on yet"""
    try:
        deleted = SaleRepository(db).delete(sale_id)
    except TransactionHasPayments as e:
        db.rollback()
        raise HTTPException(status_code=409, detail=str(e))
    if not deleted:
        raise HTTPException(status_code=404, detail="Sale not found")
    db.commit()


@router.post("/rentals", response_model=RentalSchema, status_code=201)
def create_rental_endpoint(request_body: RentalCreate, request: Request, db: Session = Depends(get_db)):
    """Record a rental billed per day, both start and end day included"""
    request_id = get_request_id(request)
    client, product = _load_parties(db, request_body.client_id, request_body.product_id)

    try:
        rental, _ = create_rental(
            client,
            product,
            quantity=request_body.quantity,
            start_date=request_body.start_date,
            end_date=request_body.end_date,
            paid_cents=request_body.paid_cents,
            deposit_cents=request_body.deposit_cents,
            created_by=request_body.created_by,
        )
        RentalRepository(db).save(rental)
        ProductRepository(db).adjust_stock(product.id, -rental.quantity)
        db.commit()

    except (InvalidAmount, InsufficientStock) as e:
        db.rollback()
        logging.warning(f"Rental rejected: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error creating rental: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    transactions_created_counter.labels(kind=rental.kind).inc()
    logging.info("Rental created", extra={"request_id": request_id, "rental_id": rental.id, "total_cents": rental.total_cents})
    return RentalSchema.model_validate(rental)


@router.get("/rentals", response_model=List[RentalSchema])
def list_rentals(db: Session = Depends(get_db)):
    return [RentalSchema.model_validate(r) for r in RentalRepository(db).get_all()]


@router.post("/rentals/{rental_id}/return", response_model=RentalSchema)
def return_rental_endpoint(rental_id: str, db: Session = Depends(get_db)):
    """Close an active rental and put its units back in stock"""
    rental = RentalRepository(db).get(rental_id)
    if not rental:
        raise HTTPException(status_code=404, detail="Rental not found")

    product_repo = ProductRepository(db)
    try:
        _, product = return_rental(rental, product_repo.get(rental.product_id))
        # Only rental_status and stock are written; the balance columns stay as stored
        RentalRepository(db).mark_returned(rental.id)
        if product is not None:
            product_repo.adjust_stock(product.id, rental.quantity)
        db.commit()
    except InvalidRentalState as e:
        db.rollback()
        raise HTTPException(status_code=422, detail=str(e))

    return RentalSchema.model_validate(RentalRepository(db).get(rental.id))
