"""
Cart Module - Request Schemas
===============================
Quantity rules are enforced by the cart service, not here, so that
they surface as business errors with a single message format.
"""

from pydantic import BaseModel


class CartInsertRequest(BaseModel):
    option_id: int
    quantity: int


class CartUpdateRequest(BaseModel):
    cart_id: int
    quantity: int


class CartDeleteRequest(BaseModel):
    cart_id: int
