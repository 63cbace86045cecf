# FILE: models/detection.py
from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.intent import IntentName


class Confidence(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def parse(cls, value: object, default: "Confidence" = None) -> "Confidence":
        default = default or cls.MEDIUM
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return default
        try:
            return cls(value.strip().lower())
        except ValueError:
            return default


# -----------------------------
# Entities
# -----------------------------
class Entities(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    products: List[str] = Field(default_factory=list)
    category: Optional[str] = Field(None)
    product_type: Optional[str] = Field(None, alias="productType")
    order_number: Optional[str] = Field(None, alias="orderNumber")

    @field_validator("products", mode="before")
    @classmethod
    def clean_products(cls, v):
        if v is None:
            return []
        if isinstance(v, str):
            v = [v]
        cleaned = []
        for item in v:
            if isinstance(item, str) and item.strip() and item.strip() not in cleaned:
                cleaned.append(item.strip())
        return cleaned

    @field_validator("category", "product_type", "order_number", mode="before")
    @classmethod
    def blank_is_missing(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def merged_with(self, fallback: "Entities") -> "Entities":
        """Fill the gaps of this extraction from another one."""
        return Entities(
            products=self.products or fallback.products,
            category=self.category or fallback.category,
            product_type=self.product_type or fallback.product_type,
            order_number=self.order_number or fallback.order_number,
        )

    def as_payload(self) -> Dict[str, Any]:
        """Wire form: camelCase keys, missing entities omitted."""
        payload = self.model_dump(by_alias=True, exclude_none=True)
        if not payload.get("products"):
            payload.pop("products", None)
        return payload


# -----------------------------
# Detection (Detector → Orchestrator)
# -----------------------------
class Detection(BaseModel):
    intents: List[IntentName] = Field(..., min_length=1)
    entities: Entities = Field(default_factory=Entities)
    confidence: Confidence = Field(Confidence.MEDIUM)
    source: Literal["rule", "ai", "fallback"] = Field("ai")

    @property
    def primary_intent(self) -> IntentName:
        return self.intents[0]

    @classmethod
    def general(cls, entities: Optional[Entities] = None) -> "Detection":
        return cls(
            intents=[IntentName.GENERAL],
            entities=entities or Entities(),
            confidence=Confidence.LOW,
            source="fallback",
        )


class DetectionResult(BaseModel):
    detection: Detection
    reply: Optional[str] = None
    requires_context: bool = False


# -----------------------------
# Raw classifier output (untrusted)
# -----------------------------
class ClassifierPayload(BaseModel):
    """
    Shape the model is asked to return. Intents stay raw strings here;
    the adapter decides which of them survive.
    """

    intents: List[str] = Field(..., min_length=1)
    entities: Optional[Entities] = None
    # Any shape; Confidence.parse decides what survives
    confidence: Optional[Any] = None

    @field_validator("intents", mode="before")
    @classmethod
    def single_intent_as_list(cls, v):
        if isinstance(v, str):
            return [v]
        return v
