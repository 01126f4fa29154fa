import logging
from typing import AsyncIterator, Optional

import httpx
from openai import AsyncOpenAI, OpenAIError

from errors import ArchiveUnavailable, ConfigurationError
from prompts import ARCHIVE_PROMPT_TEMPLATE, SECTION_MARKER, SYSTEM_INSTRUCTION
from schemas import CaseParameters

logger = logging.getLogger(__name__)


def build_prompt(params: CaseParameters) -> str:
    return ARCHIVE_PROMPT_TEMPLATE.format(
        location=params.location,
        era=params.era,
        catalyst=params.catalyst,
        language=params.language,
        marker=SECTION_MARKER,
    )


class ArchiveClient:
    """Streams a case file narrative from an OpenAI-compatible chat endpoint.

    The credential is checked on the first call to :meth:`generate`, so a
    missing key surfaces as a failed generation rather than a startup crash.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.groq.com/openai/v1",
        model: str = "llama-3.3-70b-versatile",
        temperature: float = 0.85,
        top_p: float = 0.95,
        max_output_tokens: int = 8192,
        client: Optional[AsyncOpenAI] = None,
    ):
        self.api_key = (api_key or "").strip()
        self.base_url = base_url
        self.model = model
        self.temperature = temperature
        self.top_p = top_p
        self.max_output_tokens = max_output_tokens
        self._client = client

    def _get_client(self) -> AsyncOpenAI:
        if self._client is not None:
            return self._client
        if not self.api_key:
            raise ConfigurationError("GROQ_API_KEY is not set")
        # No client-side retries: a failed stream is terminal.
        self._client = AsyncOpenAI(base_url=self.base_url, api_key=self.api_key, max_retries=0)
        return self._client

    async def generate(self, params: CaseParameters) -> AsyncIterator[str]:
        """Yield text fragments in the order the provider emits them."""
        client = self._get_client()
        prompt = build_prompt(params)
        logger.info("Opening archive stream: model=%s era=%r language=%s", self.model, params.era, params.language)

        try:
            stream = await client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_INSTRUCTION},
                    {"role": "user", "content": prompt},
                ],
                temperature=self.temperature,
                top_p=self.top_p,
                max_tokens=self.max_output_tokens,
                stream=True,
            )
            async for chunk in stream:
                if not chunk.choices:
                    continue
                text = chunk.choices[0].delta.content
                if text:
                    yield text
        except (OpenAIError, httpx.HTTPError) as e:
            logger.warning("Archive stream failed: %s", e)
            raise ArchiveUnavailable("Failed to unearth the story. The archives are sealed.") from e
