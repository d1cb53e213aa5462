"""
Report writer backed by a LangChain chat model.

Sends the filled category prompt to Google Generative AI and returns the
generated HTML document. Empty output is an error, never a placeholder
document.

Dependencies: langchain_google_genai, langchain_core
System role: Text generation step of the report pipeline
"""

import logging
import re
from typing import Any

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import HumanMessage, SystemMessage
from langchain_google_genai import ChatGoogleGenerativeAI

from quizfunnel.configs.generation import GenerationSettings
from quizfunnel.core.exceptions import GenerationError

logger = logging.getLogger(__name__)

FENCE_PATTERN = re.compile(r"^```[a-zA-Z0-9_-]*\s*\n(.*?)\n?```\s*$", re.DOTALL)


def content_to_text(content: Any) -> str:
    """
    Flatten chat model content into plain text.

    Gemini models may return a list of parts instead of a string.

    Args:
        content: AIMessage.content

    Returns:
        str: Concatenated text parts
    """
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return "".join(
            item if isinstance(item, str) else (item.get("text", "") if isinstance(item, dict) else "")
            for item in content
        )
    return ""


def strip_code_fences(text: str) -> str:
    """Remove a markdown code fence wrapping the whole document."""
    stripped = text.strip()
    match = FENCE_PATTERN.match(stripped)
    if match:
        return match.group(1).strip()
    return stripped


class ReportWriter:
    """
    Generates report HTML from a filled prompt.

    Usage:
        writer = ReportWriter.from_settings(settings.generation)
        html = await writer.generate(prompt)
    """

    def __init__(
        self,
        model_id: str = "gemini-3-flash-preview",
        temperature: float = 0.7,
        system_prompt: str = "You are a neuroscience-savvy report generator.",
        google_api_key: str | None = None,
        max_output_tokens: int | None = None,
        model: BaseChatModel | None = None,
    ) -> None:
        """
        Initialize the writer.

        Args:
            model_id: Google Generative AI model identifier
            temperature: Sampling temperature
            system_prompt: System message sent before every prompt
            google_api_key: API key; GOOGLE_API_KEY from the environment when None
            max_output_tokens: Output cap, model default when None
            model: Pre-built chat model (tests, alternative providers)
        """
        self._model_id = model_id
        self._system_prompt = system_prompt

        if model is None:
            model_kwargs: dict[str, Any] = {"model": model_id, "temperature": temperature}
            if google_api_key:
                model_kwargs["google_api_key"] = google_api_key
            if max_output_tokens:
                model_kwargs["max_output_tokens"] = max_output_tokens
            model = ChatGoogleGenerativeAI(**model_kwargs)
        self._model = model

    @classmethod
    def from_settings(cls, settings: GenerationSettings) -> "ReportWriter":
        """Build a writer from generation settings."""
        return cls(
            model_id=settings.model_id,
            temperature=settings.temperature,
            system_prompt=settings.system_prompt,
            google_api_key=settings.google_api_key,
            max_output_tokens=settings.max_output_tokens,
        )

    async def generate(self, prompt: str) -> str:
        """
        Generate a report document.

        Args:
            prompt: Filled category prompt

        Returns:
            str: Generated HTML with any wrapping code fence removed

        Raises:
            GenerationError: Model call failed or returned no text
        """
        messages = [
            SystemMessage(content=self._system_prompt),
            HumanMessage(content=prompt),
        ]
        try:
            response = await self._model.ainvoke(messages)
        except Exception as e:
            logger.error(f"{__name__}:generate - Model call failed: {type(e).__name__}: {e}")
            raise GenerationError(
                f"Text generation failed: {type(e).__name__}: {e}",
                details={"model_id": self._model_id},
            ) from e

        html = strip_code_fences(content_to_text(response.content))
        if not html:
            raise GenerationError(
                "Text generation returned empty content",
                details={"model_id": self._model_id},
            )

        logger.info(f"{__name__}:generate - Generated {len(html)} chars with {self._model_id}")
        return html
