"""
Extract structured JSON documents from free-text model output.
"""

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ..core.errors import MalformedSynthesisOutput

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

# ```json ... ``` or ``` ... ``` wrapping the whole reply
_FENCE_OPEN = re.compile(r"^\s*```[\w-]*[ \t]*\n?")
_FENCE_CLOSE = re.compile(r"\n?[ \t]*```\s*$")
_FENCED_BLOCK = re.compile(r"```[\w-]*\s*([\s\S]*?)```")


@dataclass
class Extraction:
    """Outcome of pulling JSON out of a model reply."""
    ok: bool
    value: Any = None
    error: Optional[str] = None


def strip_fences(text: str) -> str:
    """Remove a leading/trailing triple-backtick fence, with or without a language tag."""
    text = (text or "").strip()
    text = _FENCE_OPEN.sub("", text, count=1)
    text = _FENCE_CLOSE.sub("", text, count=1)
    return text.strip()


def _outermost_object(text: str) -> Optional[str]:
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        return None
    return text[start:end + 1]


def extract_json(text: str) -> Extraction:
    """
    Parse a JSON document out of a model reply.

    Tried in order: the reply with its surrounding fence removed, the first
    fenced block anywhere in the reply, the outermost {...} span.
    """
    if not text or not text.strip():
        return Extraction(ok=False, error="empty model output")

    candidates = [strip_fences(text)]
    block = _FENCED_BLOCK.search(text)
    if block:
        candidates.append(block.group(1).strip())
    span = _outermost_object(text)
    if span:
        candidates.append(span)

    last_error = None
    for candidate in candidates:
        try:
            return Extraction(ok=True, value=json.loads(candidate))
        except json.JSONDecodeError as e:
            last_error = str(e)
            continue

    return Extraction(ok=False, error=f"no JSON document found: {last_error}")


def parse_structured(text: str, model: Type[M]) -> M:
    """
    Extract and validate a document against `model`.
    Raises MalformedSynthesisOutput when the reply does not parse or fit.
    """
    extraction = extract_json(text)
    if not extraction.ok:
        logger.warning(f"Malformed model output: {extraction.error}")
        raise MalformedSynthesisOutput(
            "Model output was not valid JSON",
            detail=extraction.error,
        )
    try:
        return model.model_validate(extraction.value)
    except ValidationError as e:
        logger.warning(f"Model output does not match {model.__name__}: {e.error_count()} errors")
        raise MalformedSynthesisOutput(
            f"Model output does not match the {model.__name__} schema",
            detail=str(e),
        ) from e
