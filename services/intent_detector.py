# FILE: services/intent_detector.py
import logging

from models.detection import Confidence, Detection, DetectionResult, Entities
from services.entity_extractor import extract_entities
from services.intent_classifier import IntentClassifier
from services.pattern_matcher import match_simple_intent

logger = logging.getLogger("intent_detector")


class EmptyMessageError(ValueError):
    """Raised when a chat message is empty after trimming."""


class IntentDetector:
    """
    Pattern matcher first, language-model classifier second.

    Rules:
    - A pattern hit never calls the model and always wins
    - Classifier failures degrade to `general` / low confidence
    - Context is needed unless the primary intent is general or help
    """

    def __init__(self, classifier: IntentClassifier):
        self.classifier = classifier

    async def detect(self, message: str, role: object) -> DetectionResult:
        trimmed = (message or "").strip()
        if not trimmed:
            raise EmptyMessageError("Message cannot be empty")

        # -----------------
        # Stage 1: patterns
        # -----------------
        quick = match_simple_intent(trimmed)
        if quick:
            return DetectionResult(
                detection=Detection(
                    intents=[quick.intent],
                    entities=Entities(),
                    confidence=Confidence.HIGH,
                    source="rule",
                ),
                reply=quick.reply,
                requires_context=False,
            )

        # -----------------
        # Stage 2: classifier
        # -----------------
        outcome = await self.classifier.classify(trimmed, role)
        if outcome.ok:
            detection = outcome.detection
        else:
            logger.warning(f"[DETECT_FALLBACK] status={outcome.status.value}, reason={outcome.reason}")
            detection = Detection.general(extract_entities(trimmed))

        return DetectionResult(
            detection=detection,
            requires_context=detection.primary_intent.needs_context(),
        )
