# FILE: models/shop.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


# -----------------------------
# Records read from the data store
# -----------------------------
class Product(BaseModel):
    id: str
    name: str
    price: float = Field(0.0, description="Sales price in rupees")
    stock: int = Field(0, description="Units currently in stock")
    category: Optional[str] = None
    product_type: Optional[str] = None
    published: bool = True

    @property
    def in_stock(self) -> bool:
        return self.stock > 0


class Cart(BaseModel):
    id: str
    user_id: str


class CartItem(BaseModel):
    id: str
    cart_id: str
    product_id: str
    quantity: int = 1


class WishlistEntry(BaseModel):
    id: str
    user_id: str
    product_id: str


# -----------------------------
# Read models for view context
# -----------------------------
class CartLine(BaseModel):
    product: Product
    quantity: int

    @property
    def subtotal(self) -> float:
        return self.product.price * self.quantity


class OrderLine(BaseModel):
    product_name: str
    quantity: int
    price: float


class OrderSummary(BaseModel):
    order_number: str
    status: str
    total: float
    created_at: Optional[datetime] = None
    lines: List[OrderLine] = Field(default_factory=list)
    # Filled for store-wide listings only
    customer_name: Optional[str] = None


class Voucher(BaseModel):
    code: str
    type: str = Field(..., description="GIFT_CARD or COUPON")
    value: float = 0.0
    balance: Optional[float] = None
    discount_type: Optional[str] = Field(None, description="PERCENTAGE or FIXED, coupons only")

    @property
    def is_gift_card(self) -> bool:
        return self.type.upper() == "GIFT_CARD"

    @property
    def remaining(self) -> float:
        return self.balance if self.balance is not None else self.value


class UserSummary(BaseModel):
    name: str
    email: str
    role: str
    created_at: Optional[datetime] = None


# -----------------------------
# Aggregates (computed Python-side)
# -----------------------------
class CatalogStats(BaseModel):
    product_count: int = 0
    total_stock: int = 0


class VendorStats(CatalogStats):
    items_sold: int = 0
    revenue: float = 0.0


class StoreStats(CatalogStats):
    revenue: float = 0.0
    order_count: int = 0
    pending_orders: int = 0
    delivered_revenue: float = 0.0
    user_count: int = 0
