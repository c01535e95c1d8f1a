import asyncio
import json
import logging
import re
from collections.abc import Iterable
from typing import Any

import openai
from openai import AsyncOpenAI, OpenAI
from openai.types.chat import ChatCompletion, ChatCompletionMessageParam

__all__ = ["safe_chat_completion", "completion_text", "extract_json_object"]

# Requests that will fail the same way on every attempt
NON_RETRYABLE_ERRORS: tuple[type[Exception], ...] = (
    openai.AuthenticationError,
    openai.PermissionDeniedError,
    openai.BadRequestError,
    openai.NotFoundError,
)

_JSON_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)


async def safe_chat_completion(
    client: AsyncOpenAI | OpenAI,
    *,
    model: str,
    messages: Iterable[dict[str, Any]],
    logger: logging.Logger | None = None,
    retry_attempts: int = 3,
    retry_backoff: float = 1.0,
    **kwargs,
) -> ChatCompletion:
    """Invoke the OpenAI chat completion endpoint with retries.

    Parameters
    ----------
    client:
        An initialised ``openai.AsyncOpenAI`` client instance.
    model:
        The model name to call (e.g. ``"gpt-4o-mini"``).
    messages:
        The messages for the chat completion endpoint.
    logger:
        Optional logger for diagnostics; if omitted a module-level logger is used.
    retry_attempts:
        How many attempts to make in total. Authentication, permission,
        bad-request and not-found errors are raised immediately.
    retry_backoff:
        Base back-off (in seconds); the delay grows exponentially
        (``backoff * 2**(attempt-1)``).
    **kwargs:
        Additional keyword arguments forwarded to ``client.chat.completions.create``
        (``response_format``, ``temperature``, ``max_tokens``...).

    Returns
    -------
    ChatCompletion
        The raw response object returned by the OpenAI SDK.

    Raises
    ------
    Exception
        Re-raises the last encountered exception if all retry attempts fail.
    """
    if client is None:
        raise RuntimeError("OpenAI client is not initialised.")

    if not isinstance(client, AsyncOpenAI):
        raise TypeError("Sync OpenAI client provided to async safe_chat_completion.")

    logger = logger or logging.getLogger(__name__)
    last_exc: Exception | None = None
    typed_messages: Iterable[ChatCompletionMessageParam] = messages  # type: ignore[assignment]
    loop = asyncio.get_running_loop()

    for attempt in range(1, retry_attempts + 1):
        try:
            start_ts = loop.time()
            completion = await client.chat.completions.create(
                model=model,
                messages=typed_messages,
                **kwargs,
            )
            logger.debug(
                "OpenAI completions.create call succeeded | model=%s | latency=%.2fs",
                model,
                loop.time() - start_ts,
            )
            return completion
        except NON_RETRYABLE_ERRORS as exc:
            logger.warning("OpenAI call rejected, not retrying: %s", exc)
            raise
        except Exception as exc:  # noqa: BLE001
            last_exc = exc
            logger.warning("OpenAI call failed (attempt %s/%s): %s", attempt, retry_attempts, exc)
            if attempt < retry_attempts:
                await asyncio.sleep(retry_backoff * (2 ** (attempt - 1)))

    assert last_exc is not None  # for type checkers
    raise last_exc


def completion_text(completion: ChatCompletion | None) -> str:
    """Return the stripped text of the first choice, or an empty string."""
    if completion and completion.choices and completion.choices[0].message.content:
        return completion.choices[0].message.content.strip()
    return ""


def extract_json_object(text: str) -> dict[str, Any] | None:
    """Parse the JSON object in a model reply.

    Models sometimes wrap JSON in prose or a markdown fence, so if the whole
    text is not an object the outermost ``{...}`` span is tried instead.
    Returns None when no JSON object can be recovered.
    """
    if not text:
        return None
    candidates = [text]
    match = _JSON_OBJECT_RE.search(text)
    if match and match.group(0) != text:
        candidates.append(match.group(0))
    for candidate in candidates:
        try:
            parsed = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(parsed, dict):
            return parsed
    return None
