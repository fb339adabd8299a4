import anthropic
from functools import lru_cache
from typing import Optional
import logging
from ..config import settings
from ..exceptions import ServiceUnavailableError

logger = logging.getLogger(__name__)

NOT_CONFIGURED_MESSAGE = "AI service is not configured. Please contact your administrator."

class ClaudeClient:
    """Single text-completion gateway over the Anthropic Messages API.

    Every provider failure (timeout, quota, connection, malformed response)
    is re-raised as ServiceUnavailableError so callers can ask the user to
    retry instead of reporting a server bug.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None
    ):
        self.api_key = api_key if api_key is not None else settings.anthropic_api_key
        self.base_url = base_url if base_url is not None else settings.anthropic_base_url
        self.model = model or settings.claude_model
        self.timeout = timeout or settings.llm_timeout_seconds
        self.temperature = settings.temperature
        self.deterministic_temperature = settings.deterministic_temperature
        self._client: Optional[anthropic.AsyncAnthropic] = None

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key and self.api_key.strip())

    @property
    def client(self) -> anthropic.AsyncAnthropic:
        if self._client is None:
            self._client = anthropic.AsyncAnthropic(
                api_key=self.api_key,
                base_url=self.base_url,
                timeout=self.timeout,
                max_retries=settings.llm_max_retries
            )
        return self._client

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        deterministic: bool = False,
        max_output_tokens: int
    ) -> str:
        """Run one completion and return the text of the reply."""
        if not self.is_configured:
            raise ServiceUnavailableError(NOT_CONFIGURED_MESSAGE)

        temperature = self.deterministic_temperature if deterministic else self.temperature

        try:
            response = await self.client.messages.create(
                model=self.model,
                max_tokens=max_output_tokens,
                temperature=temperature,
                system=system_prompt,
                messages=[
                    {"role": "user", "content": user_prompt}
                ]
            )
        except anthropic.APIError as e:
            logger.error(f"Claude API error: {type(e).__name__}: {str(e)}")
            raise ServiceUnavailableError() from e

        text = self._extract_text(response)
        if not text:
            logger.error(f"Claude returned no text content (stop_reason={getattr(response, 'stop_reason', None)})")
            raise ServiceUnavailableError()
        return text

    @staticmethod
    def _extract_text(response) -> str:
        content = getattr(response, "content", None) or []
        return "".join(
            block.text for block in content
            if getattr(block, "type", None) == "text" and isinstance(getattr(block, "text", None), str)
        )

@lru_cache(maxsize=1)
def get_claude_client() -> ClaudeClient:
    """Process-wide gateway instance, used as a FastAPI dependency."""
    return ClaudeClient()
