# FILE: models/pending_action.py
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from core.intent import IntentName


class PendingActionType(str, Enum):
    ADD_TO_WISHLIST = IntentName.ADD_TO_WISHLIST.value
    REMOVE_FROM_WISHLIST = IntentName.REMOVE_FROM_WISHLIST.value
    ADD_TO_CART = IntentName.ADD_TO_CART.value
    REMOVE_FROM_CART = IntentName.REMOVE_FROM_CART.value

    def is_cart(self) -> bool:
        return self in {PendingActionType.ADD_TO_CART, PendingActionType.REMOVE_FROM_CART}


@dataclass(frozen=True)
class PendingAction:
    """
    A staged cart/wishlist change waiting for the owner's consent.
    Never mutated: a new proposal replaces it.
    """

    owner_id: str
    type: PendingActionType
    product_id: str
    product_name: str
    created_at: float
    price: Optional[float] = None
    cart_id: Optional[str] = None
    # Set when add_to_cart found an existing line, or for remove_from_cart
    cart_item_id: Optional[str] = None


@dataclass(frozen=True)
class PendingLookup:
    action: Optional[PendingAction] = None
    expired: bool = False


# -----------------------------
# Mutation outcome (Handler → Executor)
# -----------------------------
@dataclass(frozen=True)
class MutationOutcome:
    accepted: bool
    message: str
    requires_consent: bool = False
