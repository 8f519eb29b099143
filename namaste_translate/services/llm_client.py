"""Async Anthropic API wrapper with a hard timeout and JSON extraction.

Enrichment makes exactly one call per translation, so SDK retries are off.
"""

import asyncio
import json
import logging
import time
from pathlib import Path

import anthropic
import httpx

from namaste_translate.config import settings

logger = logging.getLogger(__name__)

# Singleton client, initialized lazily
_client: anthropic.AsyncAnthropic | None = None


def _get_client() -> anthropic.AsyncAnthropic:
    global _client
    if _client is None:
        _client = anthropic.AsyncAnthropic(
            api_key=settings.anthropic_api_key,
            # Transport limit sits above the hard limit in call_model
            timeout=httpx.Timeout(settings.enrichment_timeout_seconds + 5, connect=10.0),
            max_retries=0,
        )
    return _client


def load_prompt(name: str) -> str:
    """Load a prompt template from namaste_translate/prompts/{name}.txt."""
    prompt_path = Path(__file__).parent.parent / "prompts" / f"{name}.txt"
    return prompt_path.read_text(encoding="utf-8")


async def call_model(
    system: str,
    user_message: str,
    max_tokens: int | None = None,
) -> str:
    """Call the configured model once and return the raw text response."""
    client = _get_client()
    model = settings.enrichment_model
    hard_timeout = settings.enrichment_timeout_seconds

    start = time.monotonic()
    try:
        response = await asyncio.wait_for(
            client.messages.create(
                model=model,
                max_tokens=max_tokens or settings.enrichment_max_tokens,
                system=system,
                messages=[{"role": "user", "content": user_message}],
            ),
            timeout=hard_timeout,
        )
    except (asyncio.TimeoutError, anthropic.APITimeoutError):
        elapsed_ms = int((time.monotonic() - start) * 1000)
        logger.warning(
            "LLM timeout | model=%s | %dms (hard limit %ds)",
            model, elapsed_ms, hard_timeout,
        )
        raise TimeoutError(f"LLM timeout after {elapsed_ms}ms")
    except anthropic.APIStatusError as e:
        elapsed_ms = int((time.monotonic() - start) * 1000)
        logger.warning(
            "LLM error | model=%s | status=%d | %dms | %s",
            model, e.status_code, elapsed_ms, str(e)[:200],
        )
        raise

    elapsed_ms = int((time.monotonic() - start) * 1000)
    text = response.content[0].text if response.content else ""
    usage = response.usage
    logger.info(
        "LLM OK | model=%s | tokens_in=%d tokens_out=%d | %dms",
        model, usage.input_tokens, usage.output_tokens, elapsed_ms,
    )
    return text


def extract_json(text: str) -> dict | None:
    """Extract a JSON object from potentially messy LLM output.

    Strategies (in order):
      1. Full text as JSON
      2. Balanced-brace extraction
    """
    result = _try_parse(text.strip())
    if result is not None:
        return result
    return _extract_balanced(text)


def _try_parse(s: str) -> dict | None:
    try:
        obj = json.loads(s)
        if isinstance(obj, dict):
            return obj
    except (json.JSONDecodeError, ValueError):
        pass
    return None


def _extract_balanced(text: str) -> dict | None:
    pos = 0
    while pos < len(text):
        start = text.find("{", pos)
        if start == -1:
            break
        depth = 0
        in_string = False
        escape = False
        for i in range(start, len(text)):
            ch = text[i]
            if escape:
                escape = False
                continue
            if ch == "\\" and in_string:
                escape = True
                continue
            if ch == '"':
                in_string = not in_string
                continue
            if in_string:
                continue
            if ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
                if depth == 0:
                    result = _try_parse(text[start:i + 1])
                    if result is not None:
                        return result
                    pos = i + 1
                    break
        else:
            break
    return None
