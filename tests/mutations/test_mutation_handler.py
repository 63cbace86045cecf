import asyncio

from core.intent import IntentName
from models.detection import Entities
from models.pending_action import PendingActionType
from services.mutation_handler import (
    COMMIT_FAILED_MESSAGE,
    EXPIRED_MESSAGE,
    NOTHING_PENDING_MESSAGE,
    NOTHING_TO_CANCEL_MESSAGE,
)


def _products(*names):
    return Entities(products=list(names))


def _propose(mutations, intent, *names, owner="U1"):
    return asyncio.run(mutations.propose(intent, _products(*names), owner))


# ---------------------------------------------------------------------
# Cart scenarios
# ---------------------------------------------------------------------

def test_add_to_cart_stages_then_commit_inserts_one_line(mutations, repository):
    outcome = _propose(mutations, IntentName.ADD_TO_CART, "Blue Cotton Shirt")

    assert outcome.accepted
    assert outcome.requires_consent is True
    assert "Blue Cotton Shirt" in outcome.message
    assert "Rs.899.00" in outcome.message
    assert mutations.has_pending_action("U1")
    assert repository.writes == []

    result = asyncio.run(mutations.commit("U1"))

    assert result.accepted
    lines = repository.cart_lines_for("U1")
    assert len(lines) == 1
    assert lines[0].product_id == "p-blue"
    assert lines[0].quantity == 1
    assert mutations.has_pending_action("U1") is False


def test_add_to_cart_out_of_stock_is_rejected_without_staging(mutations):
    outcome = _propose(mutations, IntentName.ADD_TO_CART, "Red Silk Kurta")

    assert outcome.accepted is False
    assert outcome.requires_consent is False
    assert "out of stock" in outcome.message
    assert mutations.has_pending_action("U1") is False


def test_add_to_cart_existing_line_increments_quantity(mutations, repository):
    _propose(mutations, IntentName.ADD_TO_CART, "Blue Cotton Shirt")
    asyncio.run(mutations.commit("U1"))

    outcome = _propose(mutations, IntentName.ADD_TO_CART, "blue cotton")
    assert "already in your cart (qty: 1)" in outcome.message

    asyncio.run(mutations.commit("U1"))

    lines = repository.cart_lines_for("U1")
    assert len(lines) == 1
    assert lines[0].quantity == 2
    assert repository.writes == ["insert_cart_item", "increment_cart_item"]


def test_remove_from_cart_missing_line_is_rejected(mutations):
    outcome = _propose(mutations, IntentName.REMOVE_FROM_CART, "Kids Denim Jeans")

    assert outcome.accepted is False
    assert "not in your cart" in outcome.message
    assert mutations.has_pending_action("U1") is False


def test_remove_from_cart_deletes_line_after_confirm(mutations, repository):
    _propose(mutations, IntentName.ADD_TO_CART, "Kids Denim Jeans")
    asyncio.run(mutations.commit("U1"))

    outcome = _propose(mutations, IntentName.REMOVE_FROM_CART, "Kids Denim Jeans")
    assert outcome.requires_consent

    asyncio.run(mutations.commit("U1"))

    assert repository.cart_lines_for("U1") == []


# ---------------------------------------------------------------------
# Wishlist scenarios
# ---------------------------------------------------------------------

def test_add_to_wishlist_when_already_wishlisted_is_idempotent(mutations, repository):
    asyncio.run(repository.insert_wishlist_entry("U1", "p-blue"))
    repository.writes.clear()

    for _ in range(2):
        outcome = _propose(mutations, IntentName.ADD_TO_WISHLIST, "Blue Cotton Shirt")
        assert outcome.accepted is True
        assert outcome.requires_consent is False
        assert "already in your wishlist" in outcome.message

    assert mutations.has_pending_action("U1") is False
    assert repository.writes == []


def test_remove_from_wishlist_never_wishlisted_is_rejected(mutations):
    outcome = _propose(mutations, IntentName.REMOVE_FROM_WISHLIST, "Blue Cotton Shirt")

    assert outcome.accepted is False
    assert "not in your wishlist" in outcome.message
    assert mutations.has_pending_action("U1") is False


def test_wishlist_add_and_remove_round_trip(mutations, repository):
    _propose(mutations, IntentName.ADD_TO_WISHLIST, "Red Silk Kurta")
    asyncio.run(mutations.commit("U1"))
    assert ("U1", "p-red") in repository.wishlist

    _propose(mutations, IntentName.REMOVE_FROM_WISHLIST, "Red Silk Kurta")
    asyncio.run(mutations.commit("U1"))
    assert ("U1", "p-red") not in repository.wishlist


# ---------------------------------------------------------------------
# Guidance and misses
# ---------------------------------------------------------------------

def test_missing_product_entity_returns_guidance(mutations):
    outcome = asyncio.run(mutations.propose(IntentName.ADD_TO_CART, Entities(), "U1"))

    assert outcome.accepted is False
    assert "Please specify which product you want to add to your cart" in outcome.message
    assert mutations.has_pending_action("U1") is False


def test_unknown_product_is_a_not_found_message(mutations):
    outcome = _propose(mutations, IntentName.ADD_TO_WISHLIST, "Golden Tuxedo")

    assert outcome.accepted is False
    assert "couldn't find a product matching \"Golden Tuxedo\"" in outcome.message


def test_non_mutation_intent_is_refused(mutations):
    outcome = _propose(mutations, IntentName.VIEW_CART, "Blue Cotton Shirt")

    assert outcome.accepted is False
    assert mutations.has_pending_action("U1") is False


# ---------------------------------------------------------------------
# Single slot + staleness
# ---------------------------------------------------------------------

def test_second_proposal_is_the_only_confirmable_one(mutations, repository, store):
    _propose(mutations, IntentName.ADD_TO_CART, "Blue Cotton Shirt")
    _propose(mutations, IntentName.ADD_TO_WISHLIST, "Kids Denim Jeans")

    assert len(store) == 1
    assert store.get("U1").type is PendingActionType.ADD_TO_WISHLIST

    asyncio.run(mutations.commit("U1"))

    assert repository.cart_lines_for("U1") == []
    assert ("U1", "p-jeans") in repository.wishlist


def test_stale_action_expires_on_commit(mutations, repository, clock):
    _propose(mutations, IntentName.ADD_TO_CART, "Blue Cotton Shirt")
    clock.advance(301)

    result = asyncio.run(mutations.commit("U1"))

    assert result.accepted is False
    assert result.message == EXPIRED_MESSAGE
    assert repository.writes == []
    assert mutations.has_pending_action("U1") is False


def test_action_one_second_before_expiry_still_commits(mutations, repository, clock):
    _propose(mutations, IntentName.ADD_TO_CART, "Blue Cotton Shirt")
    clock.advance(299)

    result = asyncio.run(mutations.commit("U1"))

    assert result.accepted is True
    assert len(repository.cart_lines_for("U1")) == 1


def test_commit_without_pending_action(mutations):
    result = asyncio.run(mutations.commit("U1"))

    assert result.accepted is False
    assert result.message == NOTHING_PENDING_MESSAGE


def test_commit_runs_at_most_once(mutations, repository):
    _propose(mutations, IntentName.ADD_TO_CART, "Blue Cotton Shirt")

    first = asyncio.run(mutations.commit("U1"))
    second = asyncio.run(mutations.commit("U1"))

    assert first.accepted is True
    assert second.message == NOTHING_PENDING_MESSAGE
    assert repository.writes == ["insert_cart_item"]


def test_data_store_failure_fails_closed(mutations, repository):
    _propose(mutations, IntentName.ADD_TO_CART, "Blue Cotton Shirt")
    repository.failures["insert_cart_item"] = RuntimeError("db down")

    result = asyncio.run(mutations.commit("U1"))

    assert result.accepted is False
    assert result.message == COMMIT_FAILED_MESSAGE
    assert mutations.has_pending_action("U1") is False
    assert repository.cart_lines_for("U1") == []


# ---------------------------------------------------------------------
# Discard
# ---------------------------------------------------------------------

def test_discard_names_the_dropped_product(mutations, repository):
    _propose(mutations, IntentName.ADD_TO_CART, "Blue Cotton Shirt")

    result = mutations.discard("U1")

    assert result.message == "Cancelled. Blue Cotton Shirt was not modified. Anything else?"
    assert mutations.has_pending_action("U1") is False
    assert repository.writes == []


def test_discard_with_nothing_pending(mutations):
    assert mutations.discard("U1").message == NOTHING_TO_CANCEL_MESSAGE
