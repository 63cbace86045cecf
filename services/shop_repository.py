# FILE: services/shop_repository.py
"""
Data-store access for the assistant.

- ShopRepository is the contract the mutation and view layers depend on
- PrismaShopRepository implements it on prisma-client-py (asyncio)
- Returns plain models from models.shop, never Prisma records
"""

import logging
from typing import Any, Dict, List, Optional, Protocol

from models.shop import (
    Cart,
    CartItem,
    CartLine,
    CatalogStats,
    OrderLine,
    OrderSummary,
    Product,
    StoreStats,
    UserSummary,
    VendorStats,
    Voucher,
    WishlistEntry,
)

logger = logging.getLogger("shop_repository")
logger.setLevel(logging.INFO)
if not logger.handlers:
    fh = logging.FileHandler("shop_repository.log")
    fh.setFormatter(logging.Formatter("%(asctime)s - %(levelname)s - %(message)s"))
    logger.addHandler(fh)


class ShopRepository(Protocol):
    # Mutation path
    async def find_product_by_name(self, term: str) -> Optional[Product]: ...
    async def get_or_create_cart(self, user_id: str) -> Cart: ...
    async def find_cart_item(self, cart_id: str, product_id: str) -> Optional[CartItem]: ...
    async def insert_cart_item(self, cart_id: str, product_id: str, quantity: int = 1) -> CartItem: ...
    async def increment_cart_item(self, item_id: str, by: int = 1) -> None: ...
    async def delete_cart_item(self, item_id: str) -> None: ...
    async def find_wishlist_entry(self, user_id: str, product_id: str) -> Optional[WishlistEntry]: ...
    async def insert_wishlist_entry(self, user_id: str, product_id: str) -> WishlistEntry: ...
    async def delete_wishlist_entry(self, user_id: str, product_id: str) -> None: ...

    # View path
    async def search_products(
        self,
        *,
        name: Optional[str] = None,
        category: Optional[str] = None,
        product_type: Optional[str] = None,
        limit: int = 10,
    ) -> List[Product]: ...
    async def list_orders(self, user_id: str, order_number: Optional[str] = None, limit: int = 10) -> List[OrderSummary]: ...
    async def list_wishlist(self, user_id: str) -> List[Product]: ...
    async def list_cart(self, user_id: str) -> List[CartLine]: ...
    async def list_vouchers(self, user_id: str, limit: int = 10) -> List[Voucher]: ...

    # Vendor views (vendor id is the vendor's user id)
    async def list_vendor_products(self, vendor_id: str, limit: int = 20) -> List[Product]: ...
    async def list_vendor_orders(self, vendor_id: str, limit: int = 10) -> List[OrderSummary]: ...
    async def vendor_stats(self, vendor_id: str) -> VendorStats: ...

    # Store-wide views
    async def list_all_orders(self, order_number: Optional[str] = None, limit: int = 15) -> List[OrderSummary]: ...
    async def order_status_counts(self) -> Dict[str, int]: ...
    async def list_all_products(self, limit: int = 15) -> List[Product]: ...
    async def catalog_stats(self) -> CatalogStats: ...
    async def user_role_counts(self) -> Dict[str, int]: ...
    async def list_recent_users(self, limit: int = 10) -> List[UserSummary]: ...
    async def store_stats(self) -> StoreStats: ...


# -----------------------------
# Helpers: Prisma record → model
# -----------------------------
def _to_product(record: Any) -> Product:
    return Product(
        id=record.id,
        name=record.productName,
        price=float(record.salesPrice or 0),
        stock=int(record.currentStock or 0),
        category=getattr(record, "category", None),
        product_type=getattr(record, "productType", None),
        published=bool(getattr(record, "published", True)),
    )


def _to_line(item: Any) -> OrderLine:
    return OrderLine(
        product_name=item.product.productName if item.product else "Unknown product",
        quantity=item.quantity,
        price=float(item.price or 0),
    )


def _to_order(record: Any) -> OrderSummary:
    user = getattr(record, "user", None)
    return OrderSummary(
        order_number=record.orderNumber,
        status=str(record.status),
        total=float(record.totalAmount or 0),
        created_at=record.createdAt,
        lines=[_to_line(item) for item in (getattr(record, "items", None) or [])],
        customer_name=user.name if user else None,
    )


def _to_voucher(record: Any) -> Voucher:
    return Voucher(
        code=record.code,
        type=str(record.type),
        value=float(record.value or 0),
        balance=float(record.balance) if record.balance is not None else None,
        discount_type=record.discountType,
    )


# Storefront only: published, not a gift card
_SELLABLE: Dict[str, Any] = {"published": True, "isGiftCard": False}


class PrismaShopRepository:
    def __init__(self, db):
        self.db = db

    # -------- Products --------
    async def find_product_by_name(self, term: str) -> Optional[Product]:
        """Exact (case-insensitive) match first, then substring match."""
        term = (term or "").strip()
        if not term:
            return None

        record = await self.db.product.find_first(
            where={"productName": {"equals": term, "mode": "insensitive"}, **_SELLABLE}
        )
        if record is None:
            record = await self.db.product.find_first(
                where={"productName": {"contains": term, "mode": "insensitive"}, **_SELLABLE}
            )
        if record is None:
            logger.info(f"No product matches {term!r}")
            return None
        return _to_product(record)

    async def search_products(
        self,
        *,
        name: Optional[str] = None,
        category: Optional[str] = None,
        product_type: Optional[str] = None,
        limit: int = 10,
    ) -> List[Product]:
        where: Dict[str, Any] = dict(_SELLABLE)
        if name:
            where["productName"] = {"contains": name, "mode": "insensitive"}
        if category:
            where["category"] = {"equals": category, "mode": "insensitive"}
        if product_type:
            where["productType"] = {"contains": product_type, "mode": "insensitive"}

        records = await self.db.product.find_many(where=where, take=limit, order={"createdAt": "desc"})
        return [_to_product(r) for r in records]

    # -------- Cart --------
    async def get_or_create_cart(self, user_id: str) -> Cart:
        record = await self.db.cart.find_unique(where={"userId": user_id})
        if record is None:
            record = await self.db.cart.create(data={"userId": user_id})
        return Cart(id=record.id, user_id=record.userId)

    async def find_cart_item(self, cart_id: str, product_id: str) -> Optional[CartItem]:
        record = await self.db.cartitem.find_first(where={"cartId": cart_id, "productId": product_id})
        if record is None:
            return None
        return CartItem(id=record.id, cart_id=record.cartId, product_id=record.productId, quantity=record.quantity)

    async def insert_cart_item(self, cart_id: str, product_id: str, quantity: int = 1) -> CartItem:
        record = await self.db.cartitem.create(
            data={"cartId": cart_id, "productId": product_id, "quantity": quantity}
        )
        return CartItem(id=record.id, cart_id=record.cartId, product_id=record.productId, quantity=record.quantity)

    async def increment_cart_item(self, item_id: str, by: int = 1) -> None:
        await self.db.cartitem.update(where={"id": item_id}, data={"quantity": {"increment": by}})

    async def delete_cart_item(self, item_id: str) -> None:
        await self.db.cartitem.delete(where={"id": item_id})

    async def list_cart(self, user_id: str) -> List[CartLine]:
        record = await self.db.cart.find_unique(
            where={"userId": user_id},
            include={"items": {"include": {"product": True}}},
        )
        if record is None:
            return []
        return [
            CartLine(product=_to_product(item.product), quantity=item.quantity)
            for item in (record.items or [])
            if item.product is not None
        ]

    # -------- Wishlist --------
    async def find_wishlist_entry(self, user_id: str, product_id: str) -> Optional[WishlistEntry]:
        record = await self.db.wishlist.find_unique(
            where={"userId_productId": {"userId": user_id, "productId": product_id}}
        )
        if record is None:
            return None
        return WishlistEntry(id=record.id, user_id=record.userId, product_id=record.productId)

    async def insert_wishlist_entry(self, user_id: str, product_id: str) -> WishlistEntry:
        record = await self.db.wishlist.create(data={"userId": user_id, "productId": product_id})
        return WishlistEntry(id=record.id, user_id=record.userId, product_id=record.productId)

    async def delete_wishlist_entry(self, user_id: str, product_id: str) -> None:
        await self.db.wishlist.delete(
            where={"userId_productId": {"userId": user_id, "productId": product_id}}
        )

    async def list_wishlist(self, user_id: str) -> List[Product]:
        records = await self.db.wishlist.find_many(
            where={"userId": user_id},
            include={"product": True},
            order={"createdAt": "desc"},
        )
        return [_to_product(r.product) for r in records if r.product is not None]

    # -------- Orders --------
    async def list_orders(self, user_id: str, order_number: Optional[str] = None, limit: int = 10) -> List[OrderSummary]:
        where: Dict[str, Any] = {"userId": user_id}
        if order_number:
            where["orderNumber"] = {"contains": order_number, "mode": "insensitive"}

        records = await self.db.order.find_many(
            where=where,
            include={"items": {"include": {"product": True}}},
            order={"createdAt": "desc"},
            take=limit,
        )
        return [_to_order(r) for r in records]

    # -------- Vouchers --------
    async def list_vouchers(self, user_id: str, limit: int = 10) -> List[Voucher]:
        records = await self.db.voucher.find_many(
            where={"OR": [{"issuedTo": user_id}, {"sentTo": user_id}], "status": "ACTIVE"},
            order={"createdAt": "desc"},
            take=limit,
        )
        return [_to_voucher(r) for r in records]

    # -------- Vendor --------
    async def list_vendor_products(self, vendor_id: str, limit: int = 20) -> List[Product]:
        records = await self.db.product.find_many(
            where={"vendorId": vendor_id},
            order={"createdAt": "desc"},
            take=limit,
        )
        return [_to_product(r) for r in records]

    async def _vendor_order_items(self, vendor_id: str, **kwargs) -> List[Any]:
        return await self.db.orderitem.find_many(
            where={"product": {"is": {"vendorId": vendor_id}}},
            **kwargs,
        )

    async def list_vendor_orders(self, vendor_id: str, limit: int = 10) -> List[OrderSummary]:
        """Orders holding the vendor's products; lines and totals cover those products only."""
        items = await self._vendor_order_items(
            vendor_id,
            include={"order": True, "product": True},
            order={"createdAt": "desc"},
            take=limit * 2,
        )

        # Python-side grouping, newest order first
        groups: Dict[str, List[Any]] = {}
        for item in items:
            groups.setdefault(item.orderId, []).append(item)

        summaries = []
        for order_items in list(groups.values())[:limit]:
            order = order_items[0].order
            lines = [_to_line(i) for i in order_items]
            summaries.append(
                OrderSummary(
                    order_number=order.orderNumber,
                    status=str(order.status),
                    total=sum(line.price * line.quantity for line in lines),
                    created_at=order.createdAt,
                    lines=lines,
                )
            )
        return summaries

    async def vendor_stats(self, vendor_id: str) -> VendorStats:
        products = await self.db.product.find_many(where={"vendorId": vendor_id})
        items = await self._vendor_order_items(vendor_id)
        return VendorStats(
            product_count=len(products),
            total_stock=sum(int(p.currentStock or 0) for p in products),
            items_sold=sum(i.quantity for i in items),
            revenue=sum(float(i.price or 0) * i.quantity for i in items),
        )

    # -------- Store-wide --------
    async def list_all_orders(self, order_number: Optional[str] = None, limit: int = 15) -> List[OrderSummary]:
        where: Dict[str, Any] = {}
        if order_number:
            where["orderNumber"] = {"contains": order_number, "mode": "insensitive"}

        records = await self.db.order.find_many(
            where=where,
            include={"user": True},
            order={"createdAt": "desc"},
            take=limit,
        )
        return [_to_order(r) for r in records]

    async def order_status_counts(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for record in await self.db.order.find_many():
            status = str(record.status)
            counts[status] = counts.get(status, 0) + 1
        return counts

    async def list_all_products(self, limit: int = 15) -> List[Product]:
        records = await self.db.product.find_many(order={"createdAt": "desc"}, take=limit)
        return [_to_product(r) for r in records]

    async def catalog_stats(self) -> CatalogStats:
        records = await self.db.product.find_many()
        return CatalogStats(
            product_count=len(records),
            total_stock=sum(int(r.currentStock or 0) for r in records),
        )

    async def user_role_counts(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for record in await self.db.user.find_many():
            role = str(record.role)
            counts[role] = counts.get(role, 0) + 1
        return counts

    async def list_recent_users(self, limit: int = 10) -> List[UserSummary]:
        records = await self.db.user.find_many(order={"createdAt": "desc"}, take=limit)
        return [
            UserSummary(name=r.name, email=r.email, role=str(r.role), created_at=r.createdAt)
            for r in records
        ]

    async def store_stats(self) -> StoreStats:
        orders = await self.db.order.find_many()
        catalog = await self.catalog_stats()
        user_count = await self.db.user.count()

        return StoreStats(
            product_count=catalog.product_count,
            total_stock=catalog.total_stock,
            revenue=sum(float(o.totalAmount or 0) for o in orders),
            order_count=len(orders),
            pending_orders=sum(1 for o in orders if str(o.status).lower() == "pending"),
            delivered_revenue=sum(
                float(o.totalAmount or 0) for o in orders if str(o.status).lower() == "delivered"
            ),
            user_count=user_count,
        )
