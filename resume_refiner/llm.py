import logging

import openai
from langchain_core.prompts import ChatPromptTemplate
from langchain_openai import ChatOpenAI

from .errors import CoverLetterError, TransportError
from .models import ResumeData
from .prompts import (
    COVER_LETTER_PROMPT,
    COVER_LETTER_SYSTEM,
    OPTIMIZE_PROMPT,
    SYSTEM_BASE,
    build_cover_letter_variables,
    build_optimize_variables,
)

logger = logging.getLogger(__name__)

OVERLOADED_STATUS_CODES = {429, 503, 529}


def create_chat_model(settings, json_mode: bool = False):
    # retries are owned by GenerationClient, so the SDK must not retry on its own
    llm = ChatOpenAI(
        model=settings.model,
        temperature=settings.temperature,
        api_key=settings.api_key,
        base_url=settings.base_url,
        timeout=settings.timeout_seconds,
        max_retries=0,
    )
    if json_mode:
        return llm.bind(response_format={"type": "json_object"})
    return llm


def is_overloaded(exc: Exception) -> bool:
    if isinstance(exc, openai.RateLimitError):
        return True
    if isinstance(exc, openai.APIStatusError):
        if exc.status_code in OVERLOADED_STATUS_CODES:
            return True
        return "overloaded" in str(exc).lower()
    return False


def _text(raw) -> str:
    return raw.content if hasattr(raw, "content") else str(raw)


class OpenAIResumeOptimizer:
    """ResumeOptimizer backed by an OpenAI chat model through LangChain.

    Returns the raw JSON text; parsing and validation happen in the
    generation client so that bad output counts toward its retry budget.
    """

    def __init__(self, llm):
        self.llm = llm
        self.prompt = ChatPromptTemplate.from_messages([
            ("system", SYSTEM_BASE),
            ("human", OPTIMIZE_PROMPT),
        ])

    @classmethod
    def from_settings(cls, settings) -> "OpenAIResumeOptimizer":
        return cls(create_chat_model(settings, json_mode=True))

    async def optimize(self, data: ResumeData) -> str:
        chain = self.prompt | self.llm
        try:
            raw = await chain.ainvoke(build_optimize_variables(data))
        except openai.APIError as exc:
            raise TransportError(f"OpenAI call failed: {exc}", overloaded=is_overloaded(exc)) from exc
        text = _text(raw)
        logger.debug("optimizer returned %d chars", len(text))
        return text


class OpenAICoverLetterGenerator:
    def __init__(self, llm):
        self.llm = llm
        self.prompt = ChatPromptTemplate.from_messages([
            ("system", COVER_LETTER_SYSTEM),
            ("human", COVER_LETTER_PROMPT),
        ])

    @classmethod
    def from_settings(cls, settings) -> "OpenAICoverLetterGenerator":
        return cls(create_chat_model(settings))

    async def generate(self, data: ResumeData) -> str:
        chain = self.prompt | self.llm
        try:
            raw = await chain.ainvoke(build_cover_letter_variables(data))
        except openai.APIError as exc:
            raise CoverLetterError(f"Failed to generate cover letter: {exc}") from exc
        text = _text(raw).strip()
        if not text:
            raise CoverLetterError("No response from AI")
        return text
