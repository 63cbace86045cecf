from core.intent import IntentName
from executors.base import BaseExecutor
from models.chat import ChatReply, ChatTurn
from services.mutation_handler import MutationHandler


class ConsentExecutor(BaseExecutor):
    """
    Answers a yes/no to the staged cart or wishlist change.
    Only routed here when the user has something pending.
    """

    def __init__(self, mutations: MutationHandler):
        self.mutations = mutations

    async def execute(self, turn: ChatTurn) -> ChatReply:
        intent = turn.detection.primary_intent

        if intent is IntentName.CONFIRM:
            outcome = await self.mutations.commit(turn.user_id)
        else:
            outcome = self.mutations.discard(turn.user_id)

        return ChatReply(
            reply=outcome.message,
            kind="consent",
            intent=intent,
            meta={"accepted": outcome.accepted},
        )
