import logging
from asyncio import wait_for, TimeoutError
from functools import lru_cache
from typing import Protocol

from pydantic_ai import Agent
from pydantic_ai.models.google import GoogleModel
from pydantic_ai.providers.google import GoogleProvider
from pydantic_ai.settings import ModelSettings

from config import GEMINI_MODEL_NAME, get_env_var

logger = logging.getLogger("llm")


class LanguageModelError(Exception):
    """The model could not produce a reply (transport, quota, provider error)."""


class LanguageModelTimeout(LanguageModelError):
    """The model did not answer within the caller's time budget."""


class LanguageModel(Protocol):
    async def generate(
        self,
        prompt: str,
        *,
        temperature: float,
        top_p: float = 0.9,
        json_mode: bool = False,
        timeout: float = 30.0,
    ) -> str:
        ...


JSON_SYSTEM_PROMPT = (
    "You are a strict JSON generator. "
    "Return exactly one JSON object and nothing else: "
    "no markdown, no code fences, no commentary."
)

TEXT_SYSTEM_PROMPT = (
    "You are a helpful shopping assistant for an e-commerce store. "
    "Answer in plain, friendly text."
)


class GeminiLanguageModel:
    """
    Gemini behind pydantic-ai. One model, two agents: a JSON-only agent for
    classification and a free-text agent for replies.
    Single attempt per call, bounded by `timeout`.
    """

    def __init__(self, model_name: str, api_key: str):
        provider = GoogleProvider(api_key=api_key)
        self.model_name = model_name
        self.model = GoogleModel(model_name, provider=provider)
        self.json_agent = Agent(self.model, system_prompt=JSON_SYSTEM_PROMPT, output_type=str)
        self.text_agent = Agent(self.model, system_prompt=TEXT_SYSTEM_PROMPT, output_type=str)

    async def generate(
        self,
        prompt: str,
        *,
        temperature: float,
        top_p: float = 0.9,
        json_mode: bool = False,
        timeout: float = 30.0,
    ) -> str:
        agent = self.json_agent if json_mode else self.text_agent
        settings = ModelSettings(temperature=temperature, top_p=top_p, timeout=timeout)

        try:
            result = await wait_for(agent.run(prompt, model_settings=settings), timeout=timeout)
        except TimeoutError:
            logger.warning(f"[LLM_TIMEOUT] model={self.model_name}, timeout={timeout}s")
            raise LanguageModelTimeout(f"{self.model_name} timed out after {timeout}s")
        except Exception as e:
            logger.warning(f"[LLM_ERROR] model={self.model_name}, error={e}")
            raise LanguageModelError(str(e)) from e

        return result.output or ""


@lru_cache(maxsize=1)
def get_language_model() -> GeminiLanguageModel:
    """Build the process-wide model on first use (needs GOOGLE_API_KEY)."""
    return GeminiLanguageModel(GEMINI_MODEL_NAME, get_env_var("GOOGLE_API_KEY"))
