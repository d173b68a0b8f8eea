"""
Catalog Module - Public Routes
================================
Read-only product listing and detail.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from config.database import get_db
from config.settings import PRODUCTS_PAGE_SIZE
from common.responses import api_success
from modules.catalog.service import catalog_service, product_list_item, product_detail

router = APIRouter(prefix="/products", tags=["catalog"])


@router.get("")
async def list_products(
    page: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    products = catalog_service.list_products(db, page=page, page_size=PRODUCTS_PAGE_SIZE)
    return api_success([product_list_item(p) for p in products])


@router.get("/{product_id}")
async def get_product(
    product_id: int,
    db: Session = Depends(get_db),
):
    product = catalog_service.get_product(db, product_id)
    return api_success(product_detail(product))
