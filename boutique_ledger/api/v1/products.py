"""Product catalogue - /v1/products"""

import uuid
from datetime import datetime
from typing import List
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from boutique_ledger.api.v1.schemas import ProductCreate, ProductSchema
from boutique_ledger.domain.models import Product
from boutique_ledger.infrastructure.database.session import get_db
from boutique_ledger.infrastructure.database.repositories import ProductRepository

router = APIRouter()


@router.post("/products", response_model=ProductSchema, status_code=201)
def create_product(request_body: ProductCreate, db: Session = Depends(get_db)):
    """Add a product to the catalogue"""
    product = Product(
        id=str(uuid.uuid4()),
        created_at=datetime.now(),
        **request_body.model_dump(),
    )
    ProductRepository(db).save(product)
    db.commit()
    return ProductSchema.model_validate(product)


@router.get("/products", response_model=List[ProductSchema])
def list_products(db: Session = Depends(get_db)):
    return [ProductSchema.model_validate(p) for p in ProductRepository(db).get_all()]


@router.get("/products/barcode/{barcode}", response_model=ProductSchema)
def get_product_by_barcode(barcode: str, db: Session = Depends(get_db)):
    """
    Look up an in-stock product by scanned barcode.

    Returns 404 when the barcode is unknown or the product is out of stock.
    """
    product = ProductRepository(db).get_by_barcode(barcode)
    if not product or product.stock <= 0:
        raise HTTPException(status_code=404, detail="Product not found or out of stock")
    return ProductSchema.model_validate(product)
