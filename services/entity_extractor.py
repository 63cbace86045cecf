# FILE: services/entity_extractor.py
import re
from typing import Optional

from models.detection import Entities

PRODUCT_TYPES = ["shirt", "pant", "kurta", "saree", "dress", "jacket", "jeans"]

_CATEGORY_PATTERNS = [
    ("women", re.compile(r"\bwomen'?s?\b", re.IGNORECASE)),
    ("men", re.compile(r"\bmen'?s?\b", re.IGNORECASE)),
    ("children", re.compile(r"\bchildren'?s?\b|\bkids?\b", re.IGNORECASE)),
]

_ORDER_PATTERNS = [
    re.compile(r"\bORD-\w+|\bORD\d\w*", re.IGNORECASE),
    re.compile(r"order\s*#?\s*\d+", re.IGNORECASE),
]


def extract_category(text: str) -> Optional[str]:
    for category, pattern in _CATEGORY_PATTERNS:
        if pattern.search(text):
            return category
    return None


def extract_product_type(text: str) -> Optional[str]:
    lower = text.lower()
    for product_type in PRODUCT_TYPES:
        if product_type in lower:
            return product_type
    return None


def extract_order_number(text: str) -> Optional[str]:
    for pattern in _ORDER_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(0).upper()
    return None


def extract_entities(text: str) -> Entities:
    """
    Deterministic extraction. Never guesses product names: those come
    from the classifier only.
    """
    text = text or ""
    return Entities(
        category=extract_category(text),
        product_type=extract_product_type(text),
        order_number=extract_order_number(text),
    )
