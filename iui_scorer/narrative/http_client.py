"""
HTTP narrative provider for OpenAI-compatible chat-completions endpoints.

Credential setup (.env, gitignored):
  IUI_SCORER_NARRATIVE_API_KEY=your_key_here

Endpoint, model, timeout, token budget and minimum call interval come from
the ``[narrative]`` section of config/default.toml.

Request::

    POST {endpoint}
    Authorization: Bearer {api_key}
    {"model": ..., "max_tokens": ..., "messages": [{"role": "user", "content": prompt}]}

Every failure mode — missing key, rate limit, transport error, non-2xx
status, unexpected response shape — surfaces as ``NarrativeError`` so the
augmentation layer has exactly one exception type to handle.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

import httpx

from iui_scorer.narrative.provider import NarrativeError
from iui_scorer.narrative.rate_limit import RateLimiter

if TYPE_CHECKING:
    from iui_scorer.config import NarrativeConfig

logger = logging.getLogger(__name__)


class HttpNarrativeClient:
    """Narrative provider backed by a chat-completions HTTP API.

    Usage::

        client = HttpNarrativeClient.from_config(config.narrative)
        text = client.generate(build_prompt(result))

    Attributes:
        endpoint: Full URL of the chat-completions endpoint.
        model: Model identifier sent with each request.
        max_tokens: Upper bound on generated tokens.
        timeout: Request timeout in seconds.
        rate_limiter: Minimum-interval limiter applied before each request.
    """

    def __init__(
        self,
        endpoint: str,
        model: str,
        api_key: Optional[str],
        timeout: float = 20.0,
        max_tokens: int = 400,
        rate_limiter: Optional[RateLimiter] = None,
        http_client: Optional[httpx.Client] = None,
    ) -> None:
        self.endpoint = endpoint
        self.model = model
        self.timeout = timeout
        self.max_tokens = max_tokens
        self._api_key = api_key
        self.rate_limiter = rate_limiter or RateLimiter(0.0)
        self._http = http_client

    @classmethod
    def from_config(
        cls,
        config: "NarrativeConfig",
        http_client: Optional[httpx.Client] = None,
    ) -> "HttpNarrativeClient":
        """Build a client from the ``[narrative]`` config section."""
        return cls(
            endpoint=config.endpoint,
            model=config.model,
            api_key=config.api_key,
            timeout=config.timeout_seconds,
            max_tokens=config.max_tokens,
            rate_limiter=RateLimiter(config.min_interval_seconds),
            http_client=http_client,
        )

    def generate(self, prompt: str) -> str:
        """Send ``prompt`` and return the generated text.

        Raises:
            NarrativeError: On any credential, rate-limit, transport or
                response-format problem.
        """
        if not self._api_key:
            raise NarrativeError(
                "IUI_SCORER_NARRATIVE_API_KEY must be set in .env to request "
                "a narrative."
            )
        self.rate_limiter.acquire()

        body = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }
        headers = {"Authorization": f"Bearer {self._api_key}"}

        try:
            if self._http is not None:
                resp = self._http.post(
                    self.endpoint, json=body, headers=headers, timeout=self.timeout,
                )
            else:
                resp = httpx.post(
                    self.endpoint, json=body, headers=headers, timeout=self.timeout,
                )
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPStatusError as exc:
            raise NarrativeError(
                f"Narrative service returned HTTP {exc.response.status_code}."
            ) from exc
        except httpx.HTTPError as exc:
            raise NarrativeError(f"Narrative request failed: {exc}") from exc
        except ValueError as exc:
            raise NarrativeError("Narrative service returned invalid JSON.") from exc

        text = _extract_text(data)
        logger.info("Narrative generated (model=%s, chars=%d)", self.model, len(text))
        return text


def _extract_text(data: object) -> str:
    """Pull the first choice's message content out of a chat-completions body."""
    try:
        content = data["choices"][0]["message"]["content"]  # type: ignore[index]
    except (KeyError, IndexError, TypeError) as exc:
        raise NarrativeError("Unexpected narrative response format.") from exc
    if not isinstance(content, str) or not content.strip():
        raise NarrativeError("Narrative service returned empty content.")
    return content.strip()
