# FILE: services/chat_orchestrator.py
"""
One chat turn: detect, then hand the turn to exactly one executor.

Routing order:
1. confirm / reject while something is pending → consent
2. canned reply that needs no data → quick answer
3. cart / wishlist change → stage and ask for consent
4. anything that may need data → view (general answer when there is none)
5. everything else → general answer

A confirm/reject with nothing pending is not an error; it falls through
to the canned acknowledgement.
"""

import logging

from agents.reply_agent import ReplyAgent
from core.intent import IntentName
from core.role import Role
from executors.base import BaseExecutor
from executors.consent import ConsentExecutor
from executors.conversation import ConversationExecutor
from executors.mutation import MutationExecutor
from executors.view import ViewExecutor
from models.chat import ChatReply, ChatTurn
from services.context_builder import ContextBuilder
from services.intent_classifier import IntentClassifier
from services.intent_detector import IntentDetector
from services.mutation_handler import MutationHandler
from services.pending_actions import PendingActionStore

logger = logging.getLogger("chat_orchestrator")


class ChatOrchestrator:
    def __init__(
        self,
        detector: IntentDetector,
        mutations: MutationHandler,
        consent_executor: ConsentExecutor,
        mutation_executor: MutationExecutor,
        view_executor: ViewExecutor,
        conversation_executor: ConversationExecutor,
    ):
        self.detector = detector
        self.mutations = mutations
        self.consent_executor = consent_executor
        self.mutation_executor = mutation_executor
        self.view_executor = view_executor
        self.conversation_executor = conversation_executor

    def has_pending_action(self, user_id: str) -> bool:
        return self.mutations.has_pending_action(user_id)

    async def handle(self, text: str, user_id: str, role: object) -> ChatReply:
        role = Role.parse(role)
        result = await self.detector.detect(text, role)

        turn = ChatTurn(
            user_id=user_id,
            role=role,
            text=text.strip(),
            detection=result.detection,
            quick_reply=result.reply if not result.requires_context else None,
        )
        executor = self._select(turn)

        logger.info(
            f"[TURN] user_id={user_id}, role={role.value}, "
            f"intent={turn.detection.primary_intent.value}, executor={type(executor).__name__}"
        )
        return await executor.execute(turn)

    def _select(self, turn: ChatTurn) -> BaseExecutor:
        intent = turn.detection.primary_intent

        if intent in {IntentName.CONFIRM, IntentName.REJECT} and self.has_pending_action(turn.user_id):
            return self.consent_executor
        if turn.quick_reply:
            return self.conversation_executor
        if intent.is_mutation():
            return self.mutation_executor
        if intent.needs_context():
            return self.view_executor
        return self.conversation_executor


def build_orchestrator(repository, llm, store=None) -> ChatOrchestrator:
    """Wire the detector, mutation handler and executors around one store."""
    if store is None:
        store = PendingActionStore()
    mutations = MutationHandler(repository, store)
    replies = ReplyAgent(llm)
    conversation = ConversationExecutor(replies)

    return ChatOrchestrator(
        detector=IntentDetector(IntentClassifier(llm)),
        mutations=mutations,
        consent_executor=ConsentExecutor(mutations),
        mutation_executor=MutationExecutor(mutations),
        view_executor=ViewExecutor(ContextBuilder(repository), replies, conversation),
        conversation_executor=conversation,
    )
