import asyncio
import json

from agents.llm import LanguageModelError, LanguageModelTimeout
from agents.prompts import build_classification_prompt
from core.intent import IntentName
from core.role import Role
from models.detection import Confidence
from services.intent_classifier import (
    ClassificationStatus,
    IntentClassifier,
    filter_intents,
    parse_classifier_output,
)
from tests.fakes import FakeLanguageModel


def _reply(intents, entities=None, confidence="high"):
    return json.dumps({"intents": intents, "entities": entities or {}, "confidence": confidence})


# ---------------------------------------------------------------------
# Prompt
# ---------------------------------------------------------------------

def test_prompt_lists_only_the_roles_intents():
    customer_prompt = build_classification_prompt("show all users", Role.CUSTOMER)
    admin_prompt = build_classification_prompt("show all users", Role.ADMIN)

    assert "- view_cart:" in customer_prompt
    assert "view_all_users" not in customer_prompt
    assert "- view_all_users:" in admin_prompt
    assert 'USER MESSAGE: "show all users"' in customer_prompt


def test_prompt_keeps_message_quotes_balanced():
    prompt = build_classification_prompt('add "Blue Shirt" to cart', Role.CUSTOMER)

    assert "USER MESSAGE: \"add 'Blue Shirt' to cart\"" in prompt


# ---------------------------------------------------------------------
# Parsing / validation
# ---------------------------------------------------------------------

def test_reasoning_trace_and_prose_are_stripped():
    text = (
        "<think>The user wants the cart {maybe}</think>\n"
        "Sure! Here is the JSON:\n"
        + _reply(["add_to_cart"], {"products": ["Blue Cotton Shirt"]})
        + "\nHope that helps."
    )

    outcome = parse_classifier_output(text, "add blue cotton shirt to cart", Role.CUSTOMER)

    assert outcome.ok
    assert outcome.detection.intents == [IntentName.ADD_TO_CART]
    assert outcome.detection.entities.products == ["Blue Cotton Shirt"]
    assert outcome.detection.confidence is Confidence.HIGH
    assert outcome.detection.source == "ai"


def test_braces_in_trailing_prose_do_not_break_the_object():
    text = '{"intents": ["view_cart"], "confidence": "high"}\nNote: I skipped {general}.'

    outcome = parse_classifier_output(text, "what is in my cart", Role.CUSTOMER)

    assert outcome.ok
    assert outcome.detection.intents == [IntentName.VIEW_CART]
    assert outcome.detection.confidence is Confidence.HIGH


def test_braces_in_leading_prose_are_skipped():
    text = 'Options were {view_cart, view_orders}. Answer: {"intents": ["view_orders"]}'

    outcome = parse_classifier_output(text, "my orders", Role.CUSTOMER)

    assert outcome.ok
    assert outcome.detection.intents == [IntentName.VIEW_ORDERS]


def test_non_json_reply_is_malformed():
    outcome = parse_classifier_output("I think they want the cart.", "cart?", Role.CUSTOMER)

    assert outcome.status is ClassificationStatus.MALFORMED
    assert outcome.detection is None


def test_wrong_schema_is_malformed():
    for text in ['{"intent": "view_cart"}', '{"intents": []}', '{"intents": [1, 2]}', "{not json}"]:
        outcome = parse_classifier_output(text, "cart?", Role.CUSTOMER)
        assert outcome.status is ClassificationStatus.MALFORMED, text


def test_forbidden_intents_are_dropped_and_downgraded_to_general():
    text = _reply(["view_all_users", "view_admin_analytics"])

    outcome = parse_classifier_output(text, "show me every user", Role.CUSTOMER)

    assert outcome.ok
    assert outcome.detection.intents == [IntentName.GENERAL]


def test_unknown_and_duplicate_intents_are_removed_in_order():
    kept = filter_intents(["view_cart", "hack_the_store", "view_orders", "view_cart"], Role.CUSTOMER)

    assert kept == [IntentName.VIEW_CART, IntentName.VIEW_ORDERS]


def test_allowed_intents_survive_next_to_forbidden_ones():
    text = _reply(["view_all_orders", "view_orders"])

    outcome = parse_classifier_output(text, "show orders", Role.VENDOR)

    assert outcome.detection.intents == [IntentName.VIEW_ORDERS]


def test_missing_or_unknown_confidence_defaults_to_medium():
    outcome = parse_classifier_output(_reply(["view_cart"], confidence="very sure"), "cart", Role.CUSTOMER)
    assert outcome.detection.confidence is Confidence.MEDIUM

    outcome = parse_classifier_output('{"intents": ["view_cart"]}', "cart", Role.CUSTOMER)
    assert outcome.detection.confidence is Confidence.MEDIUM


def test_model_entities_are_merged_with_rule_entities():
    text = _reply(["view_products"], {"products": [], "category": None, "orderNumber": None})

    outcome = parse_classifier_output(text, "show men's jackets", Role.CUSTOMER)
    entities = outcome.detection.entities

    assert entities.category == "men"
    assert entities.product_type == "jacket"
    assert entities.as_payload() == {"category": "men", "productType": "jacket"}


def test_model_entities_win_over_rule_entities():
    text = _reply(["view_orders"], {"orderNumber": "ORD-999"})

    outcome = parse_classifier_output(text, "where is order 12", Role.CUSTOMER)

    assert outcome.detection.entities.order_number == "ORD-999"


# ---------------------------------------------------------------------
# Model call
# ---------------------------------------------------------------------

def test_classify_uses_low_temperature_json_mode_and_timeout():
    llm = FakeLanguageModel([_reply(["view_cart"])])
    classifier = IntentClassifier(llm, temperature=0.1, timeout=30)

    outcome = asyncio.run(classifier.classify("what's in my basket", Role.CUSTOMER))

    assert outcome.ok
    assert len(llm.calls) == 1
    call = llm.calls[0]
    assert call["json_mode"] is True
    assert call["temperature"] == 0.1
    assert call["timeout"] == 30


def test_timeout_is_reported_not_raised():
    llm = FakeLanguageModel([LanguageModelTimeout("too slow")])

    outcome = asyncio.run(IntentClassifier(llm).classify("cart", Role.CUSTOMER))

    assert outcome.status is ClassificationStatus.TIMEOUT
    assert len(llm.calls) == 1


def test_transport_error_is_reported_not_raised():
    llm = FakeLanguageModel([LanguageModelError("connection refused")])

    outcome = asyncio.run(IntentClassifier(llm).classify("cart", Role.CUSTOMER))

    assert outcome.status is ClassificationStatus.UNAVAILABLE


def test_numeric_confidence_is_not_a_schema_error():
    outcome = parse_classifier_output('{"intents": ["view_cart"], "confidence": 0.8}', "cart", Role.CUSTOMER)

    assert outcome.ok
    assert outcome.detection.intents == [IntentName.VIEW_CART]
    assert outcome.detection.confidence is Confidence.MEDIUM
