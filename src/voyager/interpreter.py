"""
Remote normalization of spoken commands via an OpenAI-compatible
chat completions endpoint.

The model is constrained to answer with either one of the seed category
tokens ("ghost", "cave", "viewpoint") or a short local-search phrase
("starbucks seattle"). Every failure raises a distinct InterpreterError
subclass; callers fall back to a direct local search on the original
query.
"""

import asyncio
import json
from typing import Any, Dict, Optional

import httpx
import structlog

from shared.config import VoyagerConfig
from shared.errors import ErrorCode, LLMError

logger = structlog.get_logger("voyager.interpreter")

SYSTEM_PROMPT = """You normalize voice commands for a maps app.
If the user is asking for ghost towns, caves, or viewpoints, output EXACTLY one of:
ghost, cave, or viewpoint.
Otherwise output a short local-search query suitable for a maps search (e.g., starbucks seattle).
Output plain text only, no quotes, no prose, no markdown."""


# =============================================================================
# Errors
# =============================================================================

class InterpreterError(LLMError):
    """Base class for every remote interpretation failure."""
    kind = "error"


class MissingCredentialError(InterpreterError):
    """No API key in the environment. Raised when the interpreter is built."""
    kind = "missing_credential"

    def __init__(self, message: str = "Missing OPENAI_API_KEY"):
        super().__init__(message, code=ErrorCode.CONFIG_ERROR)


class InterpreterHTTPError(InterpreterError):
    """Non-200 response. Carries the status code and raw body."""
    kind = "http_status"

    def __init__(self, status_code: int, body: str):
        super().__init__(f"HTTP {status_code}", detail=body)
        self.http_status = status_code
        self.body = body


class EmptyResponseError(InterpreterError):
    """200 response with no body."""
    kind = "empty_response"

    def __init__(self):
        super().__init__("Empty response body")


class MalformedResponseError(InterpreterError):
    """Body could not be parsed into message text."""
    kind = "malformed_response"

    def __init__(self, reason: str, body: Optional[str] = None):
        super().__init__(f"Parse error: {reason}", detail=body)
        self.reason = reason


class InterpreterTimeoutError(InterpreterError):
    """No answer within the configured timeout."""
    kind = "timeout"

    def __init__(self, timeout: float):
        super().__init__(f"Interpreter timed out after {timeout}s")
        self.timeout = timeout


class InterpreterUnavailableError(InterpreterError):
    """Transport failure, or the circuit breaker refused the call."""
    kind = "unavailable"


# =============================================================================
# Response parsing
# =============================================================================

def extract_message_text(payload: Any) -> str:
    """
    Pull the first choice's message text out of a chat completions payload.

    message.content is usually a string, but some gateways return a list of
    typed parts ({"type": "text", "text": "..."}); their texts are joined
    with newlines.

    Raises:
        MalformedResponseError: If the payload has no usable content
    """
    try:
        content = payload["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as e:
        raise MalformedResponseError(f"missing choices[0].message.content ({e!r})")

    if isinstance(content, str):
        text = content
    elif isinstance(content, list):
        texts = [
            part["text"] for part in content
            if isinstance(part, dict) and isinstance(part.get("text"), str)
        ]
        if not texts:
            raise MalformedResponseError("content parts carry no text")
        text = "\n".join(texts)
    else:
        raise MalformedResponseError(f"unsupported message.content shape: {type(content).__name__}")

    text = text.strip()
    if not text:
        raise MalformedResponseError("empty content")
    return text


# =============================================================================
# Client
# =============================================================================

class RemoteInterpreter:
    """Client for the remote normalization model."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        base_url: str = "https://api.openai.com/v1",
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        if not api_key:
            raise MissingCredentialError()

        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=timeout)

        # masked key tail so operators can tell which key is in use
        logger.info("interpreter_initialized", model=model, key_tail=api_key[-4:])

    @classmethod
    def from_config(cls, config: VoyagerConfig, client: Optional[httpx.AsyncClient] = None) -> "RemoteInterpreter":
        return cls(
            api_key=config.openai_api_key,
            model=config.llm_model,
            base_url=config.llm_base_url,
            timeout=config.llm_timeout_seconds,
            client=client,
        )

    def _build_request(self, utterance: str) -> Dict[str, Any]:
        return {
            "model": self.model,
            "temperature": 0,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": utterance},
            ],
        }

    async def interpret(self, utterance: str) -> str:
        """
        Normalize an utterance into a category token or a search phrase.

        Args:
            utterance: Stripped command text

        Returns:
            Trimmed model output

        Raises:
            InterpreterError: On timeout, transport, status, or parse failure
        """
        try:
            return await asyncio.wait_for(self._interpret(utterance), timeout=self.timeout)
        except asyncio.TimeoutError:
            raise InterpreterTimeoutError(self.timeout)

    async def _interpret(self, utterance: str) -> str:
        logger.info("interpreter_request", utterance=utterance, model=self.model)

        try:
            response = await self.client.post(
                f"{self.base_url}/chat/completions",
                json=self._build_request(utterance),
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                timeout=self.timeout,
            )
        except httpx.TimeoutException:
            raise InterpreterTimeoutError(self.timeout)
        except httpx.HTTPError as e:
            raise InterpreterUnavailableError(f"Transport error: {e}")

        raw_text = response.text
        if response.status_code != 200:
            raise InterpreterHTTPError(response.status_code, raw_text)
        if not response.content:
            raise EmptyResponseError()

        try:
            payload = json.loads(raw_text)
            text = extract_message_text(payload)
        except json.JSONDecodeError as e:
            logger.warning("interpreter_raw_body", body=raw_text[:500])
            raise MalformedResponseError(str(e), body=raw_text)
        except MalformedResponseError as e:
            logger.warning("interpreter_raw_body", body=raw_text[:500])
            e.detail = raw_text
            raise

        logger.info("interpreter_response", utterance=utterance, normalized=text)
        return text

    async def close(self):
        """Close the HTTP client if this interpreter created it."""
        if self._owns_client:
            await self.client.aclose()
