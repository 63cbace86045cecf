from executors.base import BaseExecutor
from models.chat import ChatReply, ChatTurn
from services.mutation_handler import MutationHandler


class MutationExecutor(BaseExecutor):
    """
    Stages a cart/wishlist change and asks for consent.
    Nothing is written to the data store here.
    """

    def __init__(self, mutations: MutationHandler):
        self.mutations = mutations

    async def execute(self, turn: ChatTurn) -> ChatReply:
        detection = turn.detection
        outcome = await self.mutations.propose(
            detection.primary_intent,
            detection.entities,
            turn.user_id,
        )
        return ChatReply(
            reply=outcome.message,
            kind="mutation",
            intent=detection.primary_intent,
            requires_consent=outcome.requires_consent,
            meta={"accepted": outcome.accepted},
        )
