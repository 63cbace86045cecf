# core/catalog.py
"""
Role-scoped intent catalog.

Pure data: which intents each role may reach, what each intent means (used
in the classification prompt), and the suggested prompts shown per role.
"""

from typing import Dict, FrozenSet, List

from core.intent import IntentName
from core.role import Role


BASE_INTENTS: FrozenSet[IntentName] = frozenset(
    {
        IntentName.GREETING,
        IntentName.HELP,
        IntentName.THANKS,
        IntentName.CONFIRM,
        IntentName.REJECT,
        IntentName.GENERAL,
    }
)

CUSTOMER_INTENTS: FrozenSet[IntentName] = frozenset(
    {
        IntentName.VIEW_ORDERS,
        IntentName.VIEW_PRODUCTS,
        IntentName.VIEW_WISHLIST,
        IntentName.VIEW_CART,
        IntentName.ADD_TO_WISHLIST,
        IntentName.REMOVE_FROM_WISHLIST,
        IntentName.ADD_TO_CART,
        IntentName.REMOVE_FROM_CART,
        IntentName.VIEW_VOUCHERS,
    }
)

VENDOR_INTENTS: FrozenSet[IntentName] = CUSTOMER_INTENTS | {
    IntentName.VIEW_MY_PRODUCTS,
    IntentName.VIEW_VENDOR_ORDERS,
    IntentName.VIEW_VENDOR_ANALYTICS,
}

ADMIN_INTENTS: FrozenSet[IntentName] = VENDOR_INTENTS | {
    IntentName.VIEW_ALL_ORDERS,
    IntentName.VIEW_ALL_PRODUCTS,
    IntentName.VIEW_ALL_USERS,
    IntentName.VIEW_ADMIN_ANALYTICS,
}

# -----------------------------
# Role → allowed intents (SINGLE SOURCE OF TRUTH)
# -----------------------------
ROLE_INTENTS: Dict[Role, FrozenSet[IntentName]] = {
    Role.CUSTOMER: BASE_INTENTS | CUSTOMER_INTENTS,
    Role.VENDOR: BASE_INTENTS | VENDOR_INTENTS,
    Role.ADMIN: BASE_INTENTS | ADMIN_INTENTS,
}

INTENT_DESCRIPTIONS: Dict[IntentName, str] = {
    IntentName.VIEW_ORDERS: "User wants to see their order history or order status",
    IntentName.VIEW_PRODUCTS: "User wants to browse or search products",
    IntentName.VIEW_WISHLIST: "User wants to see their saved/wishlist items",
    IntentName.VIEW_CART: "User wants to see what's in their shopping cart",
    IntentName.ADD_TO_WISHLIST: "User wants to save a product to wishlist",
    IntentName.REMOVE_FROM_WISHLIST: "User wants to remove a saved product from wishlist",
    IntentName.ADD_TO_CART: "User wants to add a product to cart",
    IntentName.REMOVE_FROM_CART: "User wants to remove a product from cart",
    IntentName.VIEW_VOUCHERS: "User wants to see gift cards or coupons",
    IntentName.VIEW_MY_PRODUCTS: "Vendor wants to see their listed products",
    IntentName.VIEW_VENDOR_ORDERS: "Vendor wants to see orders for their products",
    IntentName.VIEW_VENDOR_ANALYTICS: "Vendor wants to see their sales analytics",
    IntentName.VIEW_ALL_ORDERS: "Admin viewing all orders",
    IntentName.VIEW_ALL_PRODUCTS: "Admin viewing all products",
    IntentName.VIEW_ALL_USERS: "Admin viewing user list",
    IntentName.VIEW_ADMIN_ANALYTICS: "Admin viewing store-wide analytics",
    IntentName.GENERAL: "General questions or unclear intent",
}

BASE_SUGGESTIONS: List[str] = [
    "Show my orders",
    "What's in my cart?",
    "View my wishlist",
    "Show trending products",
]

VENDOR_SUGGESTIONS: List[str] = [
    "Show my listed products",
    "View orders for my products",
    "My sales analytics",
]

ADMIN_SUGGESTIONS: List[str] = [
    "Show all orders",
    "View admin dashboard",
    "Show all users",
]

ROLE_SUGGESTIONS: Dict[Role, List[str]] = {
    Role.CUSTOMER: BASE_SUGGESTIONS,
    Role.VENDOR: BASE_SUGGESTIONS + VENDOR_SUGGESTIONS,
    Role.ADMIN: BASE_SUGGESTIONS + VENDOR_SUGGESTIONS + ADMIN_SUGGESTIONS,
}


def intents_for_role(role: object) -> FrozenSet[IntentName]:
    return ROLE_INTENTS[Role.parse(role)]


def is_allowed(intent: object, role: object) -> bool:
    parsed = IntentName.parse(intent)
    return parsed is not None and parsed in intents_for_role(role)


def classifiable_intents(role: object) -> List[IntentName]:
    """
    Intents the classifier may choose from, in a stable order.
    Courtesies are left to the pattern matcher; `general` stays last.
    """
    allowed = intents_for_role(role)
    ordered = [
        intent
        for intent in IntentName
        if intent in allowed and intent in INTENT_DESCRIPTIONS and intent is not IntentName.GENERAL
    ]
    ordered.append(IntentName.GENERAL)
    return ordered


def suggestions_for_role(role: object) -> List[str]:
    return list(ROLE_SUGGESTIONS[Role.parse(role)])
