# FILE: services/intent_classifier.py
"""
Language-model classifier adapter.

The model's reply is untrusted text. It goes through a fallible
conversion (strip reasoning → find the JSON object → schema validation →
role filtering) and comes out as a ClassificationOutcome; it is never cast
straight into a Detection.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from pydantic import ValidationError

from agents.llm import LanguageModel, LanguageModelError, LanguageModelTimeout
from agents.prompts import build_classification_prompt
from config import CLASSIFIER_TEMPERATURE, CLASSIFIER_TIMEOUT_SECONDS, CLASSIFIER_TOP_P
from core.catalog import intents_for_role
from core.intent import IntentName
from models.detection import ClassifierPayload, Confidence, Detection, Entities
from services.entity_extractor import extract_entities
from services.utils import extract_json_object

logger = logging.getLogger("intent_classifier")
logger.setLevel(logging.INFO)
if not logger.handlers:
    fh = logging.FileHandler("intent_classifier.log")
    fh.setFormatter(logging.Formatter("%(asctime)s - %(levelname)s - %(message)s"))
    logger.addHandler(fh)


class ClassificationStatus(str, Enum):
    OK = "ok"
    MALFORMED = "malformed"
    TIMEOUT = "timeout"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class ClassificationOutcome:
    status: ClassificationStatus
    detection: Optional[Detection] = None
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is ClassificationStatus.OK


def filter_intents(raw_intents: List[str], role: object) -> List[IntentName]:
    """
    Keep only known intents the role may reach, in order, without repeats.
    Falls back to [general] when nothing survives.
    """
    allowed = intents_for_role(role)
    kept: List[IntentName] = []
    for raw in raw_intents:
        intent = IntentName.parse(raw)
        if intent is None or intent not in allowed:
            logger.info(f"[INTENT_DROPPED] intent={raw!r}, role={role}")
            continue
        if intent not in kept:
            kept.append(intent)
    return kept or [IntentName.GENERAL]


def parse_classifier_output(text: str, message: str, role: object) -> ClassificationOutcome:
    body = extract_json_object(text)
    if body is None:
        return ClassificationOutcome(ClassificationStatus.MALFORMED, reason="no_json_object")

    try:
        payload = ClassifierPayload.model_validate_json(body)
    except ValidationError as e:
        return ClassificationOutcome(
            ClassificationStatus.MALFORMED,
            reason=f"schema_error: {e.error_count()} error(s)",
        )

    rule_entities = extract_entities(message)
    entities = (payload.entities or Entities()).merged_with(rule_entities)

    detection = Detection(
        intents=filter_intents(payload.intents, role),
        entities=entities,
        confidence=Confidence.parse(payload.confidence),
        source="ai",
    )
    return ClassificationOutcome(ClassificationStatus.OK, detection=detection)


class IntentClassifier:
    def __init__(
        self,
        llm: LanguageModel,
        *,
        temperature: float = CLASSIFIER_TEMPERATURE,
        top_p: float = CLASSIFIER_TOP_P,
        timeout: float = CLASSIFIER_TIMEOUT_SECONDS,
    ):
        self.llm = llm
        self.temperature = temperature
        self.top_p = top_p
        self.timeout = timeout

    async def classify(self, message: str, role: object) -> ClassificationOutcome:
        prompt = build_classification_prompt(message, role)

        try:
            text = await self.llm.generate(
                prompt,
                temperature=self.temperature,
                top_p=self.top_p,
                json_mode=True,
                timeout=self.timeout,
            )
        except LanguageModelTimeout as e:
            logger.warning(f"Classifier timed out: {e}")
            return ClassificationOutcome(ClassificationStatus.TIMEOUT, reason=str(e))
        except LanguageModelError as e:
            logger.warning(f"Classifier unavailable: {e}")
            return ClassificationOutcome(ClassificationStatus.UNAVAILABLE, reason=str(e))

        outcome = parse_classifier_output(text, message, role)
        if outcome.ok:
            logger.info(
                f"Classified: intents={[i.value for i in outcome.detection.intents]}, "
                f"confidence={outcome.detection.confidence.value}"
            )
        else:
            logger.warning(f"Malformed classifier output ({outcome.reason}): {text[:200]!r}")
        return outcome
