# core/intent.py
from enum import Enum
from typing import Optional


class IntentName(str, Enum):
    """
    Closed set of things a user can ask the shopping assistant for.
    This does NOT decide who may ask for what (see core.catalog).
    """

    # Base conversational intents
    GREETING = "greeting"
    HELP = "help"
    THANKS = "thanks"
    CONFIRM = "confirm"
    REJECT = "reject"
    GENERAL = "general"

    # Customer
    VIEW_ORDERS = "view_orders"
    VIEW_PRODUCTS = "view_products"
    VIEW_WISHLIST = "view_wishlist"
    VIEW_CART = "view_cart"
    ADD_TO_WISHLIST = "add_to_wishlist"
    REMOVE_FROM_WISHLIST = "remove_from_wishlist"
    ADD_TO_CART = "add_to_cart"
    REMOVE_FROM_CART = "remove_from_cart"
    VIEW_VOUCHERS = "view_vouchers"

    # Vendor
    VIEW_MY_PRODUCTS = "view_my_products"
    VIEW_VENDOR_ORDERS = "view_vendor_orders"
    VIEW_VENDOR_ANALYTICS = "view_vendor_analytics"

    # Admin
    VIEW_ALL_ORDERS = "view_all_orders"
    VIEW_ALL_PRODUCTS = "view_all_products"
    VIEW_ALL_USERS = "view_all_users"
    VIEW_ADMIN_ANALYTICS = "view_admin_analytics"

    # -----------------------------
    # Semantic helpers (SAFE)
    # -----------------------------
    def is_mutation(self) -> bool:
        return self in MUTATION_INTENTS

    def is_view(self) -> bool:
        return self.value.startswith("view_")

    def needs_context(self) -> bool:
        return self not in {IntentName.GENERAL, IntentName.HELP}

    @classmethod
    def parse(cls, value: object) -> Optional["IntentName"]:
        """Return the matching intent, or None for anything outside the set."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


MUTATION_INTENTS = frozenset(
    {
        IntentName.ADD_TO_WISHLIST,
        IntentName.REMOVE_FROM_WISHLIST,
        IntentName.ADD_TO_CART,
        IntentName.REMOVE_FROM_CART,
    }
)
