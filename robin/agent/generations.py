"""
Generation Clients
==================

Sends an assembled prompt to a text generation service and returns the
first candidate answer, cleaned up.

Backends:
- GenerationsAPIClient: any endpoint answering {"generations": [{"text": ...}]}
  (Cohere's /v1/generate by default). Uses httpx.
- OpenAIGenerationClient: OpenAI chat completions, prompt sent as a
  single user message.

Answers sometimes come back URL-encoded and/or with HTML entities
("Tom%27s", "&amp;"), so both backends pass the text through
decode_generation_text().

Errors:
    Transport failures and non-2xx responses are logged and re-raised
    unchanged. There is no retry; callers decide what to do.
"""

from typing import Protocol
from urllib.parse import unquote

import httpx
from openai import AsyncOpenAI

from robin.utils.config import GenerationConfig
from robin.utils.logger import Logger

logger = Logger("Generations")

# Applied in order; &amp; comes after &lt;/&gt; so "&amp;lt;" becomes "&lt;"
HTML_ENTITIES = (
    ("&#39;", "'"),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&amp;", "&"),
    ("&quot;", '"'),
)


def decode_generation_text(text: str) -> str:
    """
    Undo URL encoding, then replace the common HTML entities.

    Malformed percent escapes are left as they are.

    Example:
        decode_generation_text("Tom%27s%20answer")  # "Tom's answer"
    """
    decoded = unquote(text)
    for entity, char in HTML_ENTITIES:
        decoded = decoded.replace(entity, char)
    return decoded


class TextGenerator(Protocol):
    """Anything that turns a prompt into an answer."""

    async def generate(self, prompt: str) -> str | None:
        ...


class GenerationsAPIClient:
    """
    Client for a {"generations": [{"text": ...}]} HTTP endpoint.

    Example:
        client = GenerationsAPIClient(
            url="https://api.cohere.ai/v1/generate",
            api_key="...",
        )
        answer = await client.generate("Say hi")
    """

    def __init__(
        self,
        url: str,
        api_key: str | None = None,
        model: str | None = None,
        max_tokens: int = 300,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None
    ):
        """
        Args:
            url: Generation endpoint
            api_key: Bearer token, if the endpoint needs one
            model: Model name sent with the request
            max_tokens: Upper bound on the answer length
            timeout: Request timeout in seconds
            transport: Custom httpx transport (used by tests)
        """
        self.url = url
        self.api_key = api_key
        self.model = model
        self.max_tokens = max_tokens
        self.timeout = timeout
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/json, text/plain, */*",
            "Content-Type": "application/json",
        }
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _payload(self, prompt: str) -> dict:
        payload = {"prompt": prompt, "max_tokens": self.max_tokens}
        if self.model:
            payload["model"] = self.model
        return payload

    async def generate(self, prompt: str) -> str | None:
        """
        Send one prompt and return the decoded first generation.

        Returns:
            The decoded text, or None if the response has no text

        Raises:
            httpx.HTTPError: On transport failure or a non-2xx status
        """
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(
                    self.url,
                    headers=self._headers(),
                    json=self._payload(prompt)
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                f"Generation API error: {e.response.status_code} - {e.response.text[:200]}", e
            )
            raise
        except httpx.HTTPError as e:
            logger.error("Error making generation request", e)
            raise

        data = response.json()
        generations = data.get("generations") if isinstance(data, dict) else None
        if not generations:
            logger.warning("Generation response had no generations")
            return None

        text = generations[0].get("text")
        if not text:
            return None

        return decode_generation_text(text)


class OpenAIGenerationClient:
    """
    Generation through OpenAI chat completions.

    Example:
        client = OpenAIGenerationClient(api_key="sk-...", model="gpt-4o-mini")
        answer = await client.generate("Say hi")
    """

    def __init__(self, api_key: str, model: str, client: AsyncOpenAI | None = None):
        self.model = model
        self.openai = client or AsyncOpenAI(api_key=api_key)

    async def generate(self, prompt: str) -> str | None:
        try:
            response = await self.openai.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}]
            )
        except Exception as e:
            logger.error("Error making OpenAI request", e)
            raise

        if not response.choices:
            return None

        text = response.choices[0].message.content
        if not text:
            return None

        return decode_generation_text(text)


def create_generator(config: GenerationConfig) -> TextGenerator:
    """
    Build the generation client for the configured provider.

    Raises:
        ValueError: If the openai provider is selected without OPENAI_API_KEY
    """
    if config.provider == "openai":
        if not config.openai_api_key:
            raise ValueError("GENERATION_PROVIDER=openai requires OPENAI_API_KEY")
        logger.info(f"Using OpenAI generation with model: {config.openai_model}")
        return OpenAIGenerationClient(config.openai_api_key, config.openai_model)

    logger.info(f"Using generation endpoint: {config.url}")
    return GenerationsAPIClient(
        url=config.url,
        api_key=config.api_key,
        model=config.model,
        max_tokens=config.max_tokens,
        timeout=config.timeout_seconds,
    )
