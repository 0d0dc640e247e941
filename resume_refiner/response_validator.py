import json
from collections import Counter
from typing import Any, Mapping

import pydantic

from .errors import SchemaViolationError
from .models import REFINABLE_COLLECTIONS, OptimizedResume, ResumeData


def _strip_fences(raw: str) -> str:
    raw = raw.strip()
    if raw.startswith("```"):
        lines = raw.split("\n")
        lines = lines[1:]
        if lines and lines[-1].strip() == "```":
            lines = lines[:-1]
        raw = "\n".join(lines).strip()
    return raw


def parse_response(raw: Any) -> OptimizedResume:
    """Coerce whatever the optimizer returned into an OptimizedResume.

    Accepts a model instance, a mapping, or JSON text (optionally wrapped in a
    markdown code fence). Anything unparseable is a schema violation so that
    it counts against the same retry budget as a bad shape.
    """
    if isinstance(raw, OptimizedResume):
        return raw
    try:
        if isinstance(raw, (str, bytes)):
            text = raw.decode("utf-8") if isinstance(raw, bytes) else raw
            text = _strip_fences(text)
            if not text:
                raise SchemaViolationError("No response from AI")
            return OptimizedResume.model_validate(json.loads(text))
        if isinstance(raw, Mapping):
            return OptimizedResume.model_validate(dict(raw))
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise SchemaViolationError(f"Response is not valid JSON: {exc}") from exc
    except pydantic.ValidationError as exc:
        raise SchemaViolationError(f"Response does not match schema: {exc}") from exc
    raise SchemaViolationError(f"Unsupported response type: {type(raw).__name__}")


def validate_response(data: ResumeData, response: OptimizedResume) -> OptimizedResume:
    """Check `response` against the request, one rule at a time.

    Each rule runs over every non-empty collection before the next rule
    starts, so the first violation reported follows rule order: presence,
    entry count, ids, then non-empty bullets.
    """
    if response.summary is None:
        raise SchemaViolationError("Response is missing 'summary'", collection="summary")
    if response.skills is None:
        raise SchemaViolationError("Response is missing 'skills'", collection="skills")

    requested = [(name, getattr(data, name)) for name in REFINABLE_COLLECTIONS if getattr(data, name)]

    for name, _ in requested:
        if getattr(response, name) is None:
            raise SchemaViolationError(f"Response is missing '{name}'", collection=name)

    for name, items in requested:
        fragments = getattr(response, name)
        if len(fragments) != len(items):
            raise SchemaViolationError(
                f"Expected {len(items)} '{name}' entries, got {len(fragments)}",
                collection=name,
            )

    for name, items in requested:
        counts = Counter(f.id for f in getattr(response, name))
        for item in items:
            seen = counts.get(item.id, 0)
            if seen == 0:
                raise SchemaViolationError(
                    f"'{name}' entry for id {item.id!r} is missing", collection=name, item_id=item.id
                )
            if seen > 1:
                raise SchemaViolationError(
                    f"'{name}' entry for id {item.id!r} appears {seen} times",
                    collection=name,
                    item_id=item.id,
                )

    for name, _ in requested:
        for fragment in getattr(response, name):
            if not fragment.refined_bullets:
                raise SchemaViolationError(
                    f"'{name}' entry for id {fragment.id!r} has no refined bullets",
                    collection=name,
                    item_id=fragment.id,
                )

    return response
