# FILE: services/mutation_handler.py
"""
Two-phase consent for cart and wishlist changes.

propose: resolve the product, apply domain guards, stage a PendingAction
commit:  run the staged action exactly once, or report nothing/expired
discard: drop the staged action

Fail-closed: a data-store error during commit drops the action and reports
a generic failure; nothing is retried.
"""

import logging
from typing import Optional

from core.intent import IntentName
from models.detection import Entities
from models.pending_action import MutationOutcome, PendingAction, PendingActionType
from models.shop import Product
from services.pending_actions import PendingActionStore
from services.shop_repository import ShopRepository
from services.utils import format_price

logger = logging.getLogger("mutation_handler")
logger.setLevel(logging.INFO)
if not logger.handlers:
    fh = logging.FileHandler("mutation_handler.log")
    fh.setFormatter(logging.Formatter("%(asctime)s - %(levelname)s - %(message)s"))
    logger.addHandler(fh)

NOTHING_PENDING_MESSAGE = "No pending action. What would you like to do?"
EXPIRED_MESSAGE = "The action has expired. Please try again."
COMMIT_FAILED_MESSAGE = "Something went wrong. Please try again."
NOTHING_TO_CANCEL_MESSAGE = "No action to cancel. How can I help you?"


class MutationHandler:
    def __init__(self, repository: ShopRepository, store: PendingActionStore):
        self.repository = repository
        self.store = store

    def has_pending_action(self, owner_id: str) -> bool:
        return self.store.has(owner_id)

    # -----------------------------
    # Phase 1: propose
    # -----------------------------
    async def propose(self, intent: object, entities: Optional[Entities], owner_id: str) -> MutationOutcome:
        parsed = IntentName.parse(intent)
        if parsed is None or not parsed.is_mutation():
            return MutationOutcome(accepted=False, message="Unknown action. Please try again.")
        action_type = PendingActionType(parsed.value)

        entities = entities or Entities()
        if not entities.products:
            target = "cart" if action_type.is_cart() else "wishlist"
            verb = "add to" if action_type in {PendingActionType.ADD_TO_CART, PendingActionType.ADD_TO_WISHLIST} else "remove from"
            return MutationOutcome(
                accepted=False,
                message=(
                    f"Please specify which product you want to {verb} your {target}. "
                    f"For example: \"Add Blue Cotton Shirt to {target}\""
                ),
            )

        search_term = entities.products[0]
        product = await self.repository.find_product_by_name(search_term)
        if product is None:
            return MutationOutcome(
                accepted=False,
                message=f"I couldn't find a product matching \"{search_term}\". Please try with the exact product name.",
            )

        if action_type.is_cart():
            return await self._propose_cart(action_type, product, owner_id)
        return await self._propose_wishlist(action_type, product, owner_id)

    async def _propose_wishlist(self, action_type: PendingActionType, product: Product, owner_id: str) -> MutationOutcome:
        existing = await self.repository.find_wishlist_entry(owner_id, product.id)

        if action_type is PendingActionType.ADD_TO_WISHLIST and existing:
            return MutationOutcome(accepted=True, message=f"{product.name} is already in your wishlist!")
        if action_type is PendingActionType.REMOVE_FROM_WISHLIST and not existing:
            return MutationOutcome(accepted=False, message=f"{product.name} is not in your wishlist.")

        self._stage(action_type, product, owner_id)

        if action_type is PendingActionType.ADD_TO_WISHLIST:
            message = f"Would you like to add **{product.name}** ({format_price(product.price)}) to your wishlist?"
        else:
            message = f"Would you like to remove **{product.name}** from your wishlist?"
        return MutationOutcome(accepted=True, message=message, requires_consent=True)

    async def _propose_cart(self, action_type: PendingActionType, product: Product, owner_id: str) -> MutationOutcome:
        if action_type is PendingActionType.ADD_TO_CART and not product.in_stock:
            return MutationOutcome(accepted=False, message=f"Sorry, **{product.name}** is currently out of stock.")

        cart = await self.repository.get_or_create_cart(owner_id)
        existing_item = await self.repository.find_cart_item(cart.id, product.id)

        if action_type is PendingActionType.REMOVE_FROM_CART:
            if existing_item is None:
                return MutationOutcome(accepted=False, message=f"{product.name} is not in your cart.")
            self._stage(action_type, product, owner_id, cart_id=cart.id, cart_item_id=existing_item.id)
            return MutationOutcome(
                accepted=True,
                message=f"Would you like to remove **{product.name}** from your cart?",
                requires_consent=True,
            )

        self._stage(
            action_type,
            product,
            owner_id,
            cart_id=cart.id,
            cart_item_id=existing_item.id if existing_item else None,
        )
        if existing_item:
            message = (
                f"**{product.name}** is already in your cart (qty: {existing_item.quantity}). "
                "Would you like to add one more?"
            )
        else:
            message = f"Would you like to add **{product.name}** ({format_price(product.price)}) to your cart?"
        return MutationOutcome(accepted=True, message=message, requires_consent=True)

    def _stage(
        self,
        action_type: PendingActionType,
        product: Product,
        owner_id: str,
        cart_id: Optional[str] = None,
        cart_item_id: Optional[str] = None,
    ) -> PendingAction:
        action = PendingAction(
            owner_id=owner_id,
            type=action_type,
            product_id=product.id,
            product_name=product.name,
            price=product.price,
            cart_id=cart_id,
            cart_item_id=cart_item_id,
            created_at=self.store.now(),
        )
        self.store.propose(owner_id, action)
        logger.info(f"[STAGED] owner={owner_id}, type={action_type.value}, product_id={product.id}")
        return action

    # -----------------------------
    # Phase 2: commit / discard
    # -----------------------------
    async def commit(self, owner_id: str) -> MutationOutcome:
        lookup = self.store.take(owner_id)
        if lookup.expired:
            return MutationOutcome(accepted=False, message=EXPIRED_MESSAGE)
        if lookup.action is None:
            return MutationOutcome(accepted=False, message=NOTHING_PENDING_MESSAGE)

        action = lookup.action
        try:
            message = await self._apply(action)
        except Exception:
            logger.exception(f"[COMMIT_FAILED] owner={owner_id}, type={action.type.value}, product_id={action.product_id}")
            return MutationOutcome(accepted=False, message=COMMIT_FAILED_MESSAGE)

        logger.info(f"[COMMITTED] owner={owner_id}, type={action.type.value}, product_id={action.product_id}")
        return MutationOutcome(accepted=True, message=message)

    async def _apply(self, action: PendingAction) -> str:
        if action.type is PendingActionType.ADD_TO_WISHLIST:
            existing = await self.repository.find_wishlist_entry(action.owner_id, action.product_id)
            if existing:
                return f"{action.product_name} is already in your wishlist!"
            await self.repository.insert_wishlist_entry(action.owner_id, action.product_id)
            return f"Added **{action.product_name}** to your wishlist!"

        if action.type is PendingActionType.REMOVE_FROM_WISHLIST:
            await self.repository.delete_wishlist_entry(action.owner_id, action.product_id)
            return f"Removed **{action.product_name}** from your wishlist."

        if action.type is PendingActionType.ADD_TO_CART:
            if action.cart_item_id:
                await self.repository.increment_cart_item(action.cart_item_id, by=1)
            else:
                await self.repository.insert_cart_item(action.cart_id, action.product_id, quantity=1)
            return f"Added **{action.product_name}** to your cart!"

        await self.repository.delete_cart_item(action.cart_item_id)
        return f"Removed **{action.product_name}** from your cart."

    def discard(self, owner_id: str) -> MutationOutcome:
        action = self.store.clear(owner_id)
        if action is None:
            return MutationOutcome(accepted=True, message=NOTHING_TO_CANCEL_MESSAGE)
        logger.info(f"[DISCARDED] owner={owner_id}, type={action.type.value}, product_id={action.product_id}")
        return MutationOutcome(
            accepted=True,
            message=f"Cancelled. {action.product_name} was not modified. Anything else?",
        )
