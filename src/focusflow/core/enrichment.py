"""Optional language-model enrichment with a rule-based fallback.

Every enrichment returns either Enriched(data) or Fallback(data); callers
never see an exception from the text-generation service.
"""

import json
import logging
import re
from dataclasses import dataclass
from typing import Callable

from .errors import EnrichmentError

logger = logging.getLogger(__name__)

FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


@dataclass(frozen=True)
class Enriched:
    data: dict

    is_ai_powered = True


@dataclass(frozen=True)
class Fallback:
    data: dict

    is_ai_powered = False


EnrichmentResult = Enriched | Fallback


def tagged(result: EnrichmentResult) -> dict:
    """Response payload with the isAIPowered flag attached."""
    return {**result.data, "isAIPowered": result.is_ai_powered}


def parse_json_reply(reply: str) -> dict:
    """Parse a model reply as a JSON object, tolerating a Markdown code fence."""
    if not isinstance(reply, str):
        raise ValueError(f"Expected a text reply, got {type(reply).__name__}")
    text = reply.strip()
    match = FENCE_RE.match(text)
    if match:
        text = match.group(1)
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
    return data


def require_keys(*keys: str) -> Callable[[dict], dict]:
    """Build a validator that rejects replies missing any of `keys`."""

    def validate(data: dict) -> dict:
        missing = [k for k in keys if k not in data]
        if missing:
            raise ValueError(f"Reply missing keys: {', '.join(missing)}")
        return data

    return validate


def enrich(
    fallback: dict,
    prompt: str,
    llm=None,
    validate: Callable[[dict], dict] | None = None,
) -> EnrichmentResult:
    """
    Ask `llm` for a richer version of `fallback`.

    Any failure (no service, transport error, timeout, non-JSON reply, wrong
    shape) returns Fallback(fallback) unchanged.
    """
    if llm is None:
        return Fallback(fallback)
    try:
        data = parse_json_reply(llm.generate(prompt))
        if validate is not None:
            data = validate(data)
    except (EnrichmentError, TimeoutError, OSError) as e:
        logger.warning(f"Enrichment service failed, using rule-based result: {e}")
        return Fallback(fallback)
    except ValueError as e:
        logger.warning(f"Enrichment reply unusable, using rule-based result: {e}")
        return Fallback(fallback)
    return Enriched(data)
