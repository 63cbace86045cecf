import logging

from agents.llm import LanguageModelError
from agents.reply_agent import ReplyAgent
from executors.base import BaseExecutor
from executors.conversation import ConversationExecutor
from models.chat import ChatReply, ChatTurn
from services.context_builder import ContextBuilder

logger = logging.getLogger("view_executor")


class ViewExecutor(BaseExecutor):
    """
    Executes view intents: fetch data, let the reply model phrase it.
    Falls back to the raw data when the model fails, and to a general
    answer when there is no data to show.
    """

    def __init__(self, context_builder: ContextBuilder, replies: ReplyAgent, conversation: ConversationExecutor):
        self.context_builder = context_builder
        self.replies = replies
        self.conversation = conversation

    async def execute(self, turn: ChatTurn) -> ChatReply:
        detection = turn.detection
        context = await self.context_builder.build(detection, turn.user_id, turn.role)

        if not context:
            return await self.conversation.execute(turn)

        try:
            reply = await self.replies.answer_with_context(context, turn.text)
        except LanguageModelError as e:
            logger.warning(f"[VIEW_REPLY_FALLBACK] user_id={turn.user_id}, error={e}")
            reply = ""

        return ChatReply(
            reply=reply or context,
            kind="view",
            intent=detection.primary_intent,
            meta={
                "intents": [i.value for i in detection.intents],
                "entities": detection.entities.as_payload(),
            },
        )
