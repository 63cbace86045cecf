from agents.llm import LanguageModel
from agents.prompts import build_general_reply_prompt, build_view_reply_prompt
from config import REPLY_TEMPERATURE, REPLY_TIMEOUT_SECONDS, REPLY_TOP_P
from services.utils import strip_reasoning


class ReplyAgent:
    """
    Phrases answers for the user. Raises LanguageModelError on failure;
    callers decide the fallback text.
    """

    def __init__(
        self,
        llm: LanguageModel,
        *,
        temperature: float = REPLY_TEMPERATURE,
        top_p: float = REPLY_TOP_P,
        timeout: float = REPLY_TIMEOUT_SECONDS,
    ):
        self.llm = llm
        self.temperature = temperature
        self.top_p = top_p
        self.timeout = timeout

    async def _generate(self, prompt: str) -> str:
        text = await self.llm.generate(
            prompt,
            temperature=self.temperature,
            top_p=self.top_p,
            json_mode=False,
            timeout=self.timeout,
        )
        return strip_reasoning(text)

    async def answer_with_context(self, context: str, message: str) -> str:
        return await self._generate(build_view_reply_prompt(context, message))

    async def answer_general(self, message: str) -> str:
        return await self._generate(build_general_reply_prompt(message))
