# FILE: services/context_builder.py
"""
Plain-text data context for view intents, handed to the reply model.
Every view intent has a renderer; role checks go through the catalog.
Turns with no view intent produce no context and get a general answer.
"""

from typing import Awaitable, Callable, Dict, List, Optional

from core.catalog import is_allowed
from core.intent import IntentName
from models.detection import Detection, Entities
from services.shop_repository import ShopRepository
from services.utils import format_price


SECTION_SEPARATOR = "\n\n---\n\n"


class ContextBuilder:
    def __init__(self, repository: ShopRepository):
        self.repository = repository
        self._renderers: Dict[IntentName, Callable[[Entities, str], Awaitable[Optional[str]]]] = {
            IntentName.VIEW_ORDERS: self._orders,
            IntentName.VIEW_PRODUCTS: self._products,
            IntentName.VIEW_WISHLIST: self._wishlist,
            IntentName.VIEW_CART: self._cart,
            IntentName.VIEW_VOUCHERS: self._vouchers,
            IntentName.VIEW_MY_PRODUCTS: self._vendor_products,
            IntentName.VIEW_VENDOR_ORDERS: self._vendor_orders,
            IntentName.VIEW_VENDOR_ANALYTICS: self._vendor_analytics,
            IntentName.VIEW_ALL_ORDERS: self._all_orders,
            IntentName.VIEW_ALL_PRODUCTS: self._all_products,
            IntentName.VIEW_ALL_USERS: self._all_users,
            IntentName.VIEW_ADMIN_ANALYTICS: self._admin_analytics,
        }

    async def build(self, detection: Detection, user_id: str, role: object) -> Optional[str]:
        parts: List[str] = []
        for intent in detection.intents:
            if not intent.is_view() or not is_allowed(intent, role):
                continue
            section = await self._renderers[intent](detection.entities, user_id)
            if section:
                parts.append(section)

        if not parts:
            return None
        return SECTION_SEPARATOR.join(parts)

    # -----------------------------
    # Renderers
    # -----------------------------
    async def _orders(self, entities: Entities, user_id: str) -> Optional[str]:
        orders = await self.repository.list_orders(user_id, order_number=entities.order_number)
        if not orders:
            if entities.order_number:
                return f"No order found with number \"{entities.order_number}\"."
            return "You haven't placed any orders yet."

        lines = [f"YOUR ORDERS ({len(orders)}):"]
        for order in orders:
            placed = order.created_at.strftime("%d %b %Y") if order.created_at else "unknown date"
            lines.append(f"• {order.order_number} | {order.status} | {format_price(order.total)} | {placed}")
            for line in order.lines:
                lines.append(f"   - {line.product_name} x{line.quantity} @ {format_price(line.price)}")
        return "\n".join(lines)

    async def _products(self, entities: Entities, user_id: str) -> Optional[str]:
        products = await self.repository.search_products(
            name=entities.products[0] if entities.products else None,
            category=entities.category,
            product_type=entities.product_type,
        )
        if not products:
            return "No products found matching your search."

        lines = [f"PRODUCTS ({len(products)}):"]
        for product in products:
            stock = "in stock" if product.in_stock else "out of stock"
            lines.append(f"• {product.name} | {format_price(product.price)} | {stock}")
        return "\n".join(lines)

    async def _wishlist(self, entities: Entities, user_id: str) -> Optional[str]:
        products = await self.repository.list_wishlist(user_id)
        if not products:
            return "Your wishlist is empty."

        lines = [f"YOUR WISHLIST ({len(products)} items):"]
        lines.extend(f"• {p.name} | {format_price(p.price)}" for p in products)
        return "\n".join(lines)

    async def _cart(self, entities: Entities, user_id: str) -> Optional[str]:
        cart_lines = await self.repository.list_cart(user_id)
        if not cart_lines:
            return "Your cart is empty."

        lines = [f"YOUR CART ({len(cart_lines)} items):"]
        for line in cart_lines:
            lines.append(f"• {line.product.name} x{line.quantity} | {format_price(line.subtotal)}")
        total = sum(line.subtotal for line in cart_lines)
        lines.append(f"TOTAL: {format_price(total)}")
        return "\n".join(lines)

    async def _vouchers(self, entities: Entities, user_id: str) -> Optional[str]:
        vouchers = await self.repository.list_vouchers(user_id)
        if not vouchers:
            return "You have no active vouchers or gift cards."

        gift_cards = [v for v in vouchers if v.is_gift_card]
        coupons = [v for v in vouchers if not v.is_gift_card]

        sections = []
        if gift_cards:
            lines = [f"GIFT CARDS ({len(gift_cards)}):"]
            lines.extend(f"• {v.code}: {format_price(v.remaining)} remaining" for v in gift_cards)
            sections.append("\n".join(lines))
        if coupons:
            lines = [f"COUPONS ({len(coupons)}):"]
            for v in coupons:
                if (v.discount_type or "").upper() == "PERCENTAGE":
                    discount = f"{v.value:g}% off"
                else:
                    discount = f"{format_price(v.value)} off"
                lines.append(f"• {v.code}: {discount}")
            sections.append("\n".join(lines))
        return "\n\n".join(sections)

    # -----------------------------
    # Vendor renderers
    # -----------------------------
    async def _vendor_products(self, entities: Entities, user_id: str) -> Optional[str]:
        products = await self.repository.list_vendor_products(user_id)
        if not products:
            return "You have not listed any products yet."

        lines = [f"YOUR PRODUCTS ({len(products)}):"]
        for p in products:
            status = "published" if p.published else "paused"
            lines.append(f"• {p.name} | {format_price(p.price)} | stock: {p.stock} | {status}")
        return "\n".join(lines)

    async def _vendor_orders(self, entities: Entities, user_id: str) -> Optional[str]:
        orders = await self.repository.list_vendor_orders(user_id)
        if not orders:
            return "No orders for your products yet."

        lines = [f"ORDERS FOR YOUR PRODUCTS ({len(orders)}):"]
        for order in orders:
            placed = order.created_at.strftime("%d %b") if order.created_at else "unknown date"
            lines.append(
                f"• {order.order_number}: {len(order.lines)} item(s) | {format_price(order.total)} "
                f"| {order.status} | {placed}"
            )
        return "\n".join(lines)

    async def _vendor_analytics(self, entities: Entities, user_id: str) -> Optional[str]:
        stats = await self.repository.vendor_stats(user_id)
        return "\n".join(
            [
                "YOUR VENDOR ANALYTICS:",
                f"• Products listed: {stats.product_count}",
                f"• Total stock: {stats.total_stock}",
                f"• Items sold: {stats.items_sold}",
                f"• Total revenue: {format_price(stats.revenue)}",
            ]
        )

    # -----------------------------
    # Admin renderers
    # -----------------------------
    async def _all_orders(self, entities: Entities, user_id: str) -> Optional[str]:
        orders = await self.repository.list_all_orders(order_number=entities.order_number)
        if not orders:
            return "No orders found."

        counts = await self.repository.order_status_counts()
        status_line = ", ".join(f"{status}: {count}" for status, count in counts.items())

        lines = ["ALL ORDERS:", f"Status: {status_line}", ""]
        for order in orders:
            placed = order.created_at.strftime("%d %b") if order.created_at else "unknown date"
            lines.append(
                f"• {order.order_number} | {order.customer_name or 'unknown customer'} "
                f"| {format_price(order.total)} | {order.status} | {placed}"
            )
        return "\n".join(lines)

    async def _all_products(self, entities: Entities, user_id: str) -> Optional[str]:
        products = await self.repository.list_all_products()
        stats = await self.repository.catalog_stats()

        lines = [f"ALL PRODUCTS ({stats.product_count}):", f"Total stock: {stats.total_stock}", ""]
        for p in products:
            status = "published" if p.published else "paused"
            lines.append(f"• {p.name} | {format_price(p.price)} | stock: {p.stock} | {status}")
        return "\n".join(lines)

    async def _all_users(self, entities: Entities, user_id: str) -> Optional[str]:
        counts = await self.repository.user_role_counts()
        users = await self.repository.list_recent_users()

        lines = ["USERS:", ", ".join(f"{role}: {count}" for role, count in counts.items()), "", "Recent:"]
        for u in users:
            joined = u.created_at.strftime("%d %b") if u.created_at else "unknown date"
            lines.append(f"• {u.name} ({u.role}) | {u.email} | {joined}")
        return "\n".join(lines)

    async def _admin_analytics(self, entities: Entities, user_id: str) -> Optional[str]:
        stats = await self.repository.store_stats()
        return "\n".join(
            [
                "ADMIN DASHBOARD:",
                f"• Revenue: {format_price(stats.revenue)}",
                f"• Total orders: {stats.order_count}",
                f"• Pending orders: {stats.pending_orders}",
                f"• Delivered revenue: {format_price(stats.delivered_revenue)}",
                f"• Products: {stats.product_count}",
                f"• Total stock: {stats.total_stock}",
                f"• Total users: {stats.user_count}",
            ]
        )
