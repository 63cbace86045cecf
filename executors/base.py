from abc import ABC, abstractmethod

from models.chat import ChatReply, ChatTurn


class BaseExecutor(ABC):
    """
    Base contract for all executors.
    Executors take a detected ChatTurn and return a ChatReply.
    No detection, no routing here.
    """

    @abstractmethod
    async def execute(self, turn: ChatTurn) -> ChatReply:
        pass
