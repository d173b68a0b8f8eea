"""
Cart Module - API Routes
==========================
JSON endpoints for the authenticated user's cart.

Endpoints:
  GET    /carts — Cart grouped by product + total price
  POST   /carts — Add quantities ([{option_id, quantity}])
  PUT    /carts — Set quantities ([{cart_id, quantity}])
  DELETE /carts — Remove lines ([{cart_id}])
"""

import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from config.database import get_db
from common.exceptions import ConflictError
from common.responses import api_success
from modules.auth.deps import require_login
from modules.cart.schemas import CartInsertRequest, CartUpdateRequest, CartDeleteRequest
from modules.cart.service import cart_service

logger = logging.getLogger("shop.cart")

router = APIRouter(prefix="/carts", tags=["cart"])

CONFLICT_MESSAGE = "Cart was changed by another request. Please retry."


# ==========================================
# 🛒 View Cart
# ==========================================

@router.get("")
async def find_all(
    db: Session = Depends(get_db),
    me=Depends(require_login),
):
    return api_success(cart_service.find_all(db, me.id))


# ==========================================
# ➕ Add Items
# ==========================================

@router.post("")
async def insert(
    body: List[CartInsertRequest],
    db: Session = Depends(get_db),
    me=Depends(require_login),
):
    try:
        cart_service.add_items(db, me.id, body)
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"User #{me.id} add conflicted: {e.orig}")
        raise ConflictError(CONFLICT_MESSAGE)
    return api_success(None)


# ==========================================
# ✏️ Update Items
# ==========================================

@router.put("")
async def update(
    body: List[CartUpdateRequest],
    db: Session = Depends(get_db),
    me=Depends(require_login),
):
    try:
        result = cart_service.update_items(db, me.id, body)
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"User #{me.id} update conflicted: {e.orig}")
        raise ConflictError(CONFLICT_MESSAGE)
    return api_success(result)


# ==========================================
# ❌ Delete Items
# ==========================================

@router.delete("")
async def delete(
    body: List[CartDeleteRequest],
    db: Session = Depends(get_db),
    me=Depends(require_login),
):
    try:
        cart_service.delete_items(db, me.id, [req.cart_id for req in body])
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"User #{me.id} delete conflicted: {e.orig}")
        raise ConflictError(CONFLICT_MESSAGE)
    return api_success(None)
