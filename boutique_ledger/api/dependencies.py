"""Dependency injection for FastAPI endpoints"""

from fastapi import Request
from boutique_ledger.config import settings
from boutique_ledger.infrastructure.documents.receipts import ShopDetails


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_shop_details() -> ShopDetails:
    """Provide the letterhead printed on receipts and reports"""
    return ShopDetails(
        name=settings.shop_name,
        tagline=settings.shop_tagline,
        phone=settings.shop_phone,
        currency=settings.currency,
    )
