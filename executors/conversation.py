import logging

from agents.llm import LanguageModelError
from agents.reply_agent import ReplyAgent
from executors.base import BaseExecutor
from models.chat import ChatReply, ChatTurn

logger = logging.getLogger("conversation_executor")

FALLBACK_REPLY = (
    "I'm not sure I understood. Could you please rephrase? "
    "I can help with orders, products, wishlist, and more!"
)


class ConversationExecutor(BaseExecutor):
    """
    Executes general / unclear turns.
    Pattern-matched courtesies are answered with their canned reply.
    """

    def __init__(self, replies: ReplyAgent):
        self.replies = replies

    async def execute(self, turn: ChatTurn) -> ChatReply:
        intent = turn.detection.primary_intent

        if turn.quick_reply:
            return ChatReply(reply=turn.quick_reply, kind="quick", intent=intent)

        try:
            reply = await self.replies.answer_general(turn.text)
        except LanguageModelError as e:
            logger.warning(f"[GENERAL_REPLY_FALLBACK] user_id={turn.user_id}, error={e}")
            reply = ""

        return ChatReply(reply=reply or FALLBACK_REPLY, kind="general", intent=intent)
