import logging
import aiohttp
from dataclasses import dataclass
from typing import Optional, Protocol
from jobtracker.core.config import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationOptions:
    """Sampling bounds for a single text-generation call."""
    temperature: float = 0.7
    max_tokens: int = 300


class TextGenerator(Protocol):
    """Anything that turns a prompt into text. May raise or hang; callers bound it."""

    async def generate(self, prompt: str, options: GenerationOptions) -> str:
        ...


class LLMTextGenerator:
    """Text generation against an OpenAI-compatible chat completions endpoint."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_base: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        system_prompt: str = "You are an experienced job search career coach.",
    ):
        self.api_key = api_key or settings.openai_api_key
        self.api_base = (api_base or settings.openai_api_base).rstrip("/")
        self.model = model or settings.llm_model
        self.timeout = timeout or settings.llm_request_timeout
        self.system_prompt = system_prompt

        if not self.api_key:
            logger.warning("OPENAI_API_KEY not set. AI insights will be omitted from reports.")

    async def generate(self, prompt: str, options: GenerationOptions) -> str:
        """
        Generate text for a prompt.

        Raises RuntimeError when the API is unconfigured or answers with an error,
        and ValueError when the response body has no usable text.
        """
        if not self.api_key:
            raise RuntimeError("Text generation is not configured (missing API key)")

        url = f"{self.api_base}/chat/completions"
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json"
        }

        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": self.system_prompt},
                {"role": "user", "content": prompt}
            ],
            "temperature": options.temperature,
            "max_tokens": options.max_tokens,
        }

        timeout = aiohttp.ClientTimeout(total=self.timeout)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.post(url, headers=headers, json=payload) as response:
                if response.status != 200:
                    error_text = await response.text()
                    logger.error(f"LLM API Error {response.status}: {error_text[:500]}")
                    raise RuntimeError(f"AI API Failed: {response.status}")

                data = await response.json()

        try:
            content = data['choices'][0]['message']['content']
        except (KeyError, IndexError, TypeError) as e:
            raise ValueError(f"Malformed completion payload: {e}") from e
        if not isinstance(content, str):
            raise ValueError("Completion content is not text")
        return content
