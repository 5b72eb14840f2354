"""
Model output parsing.

Models often wrap JSON in a markdown fence. The first ```json fence wins,
then a bare ``` fence, otherwise the whole text is parsed.
"""

import json
import re
from typing import Type, TypeVar

import structlog
from pydantic import BaseModel, ValidationError

from decisionhub.errors import ParseFailure

logger = structlog.get_logger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)

# any line ending, or none for a single-line fence
_JSON_FENCE = re.compile(r"```json\s*([\s\S]*?)\s*```")
_BARE_FENCE = re.compile(r"```\s*([\s\S]*?)\s*```")


def strip_code_fence(text: str) -> str:
    match = _JSON_FENCE.search(text) or _BARE_FENCE.search(text)
    return match.group(1) if match else text


def parse_model_json(text: str, schema: Type[SchemaT]) -> SchemaT:
    """Strip an optional fence, parse JSON and validate it against ``schema``."""
    body = strip_code_fence(text)
    try:
        data = json.loads(body)
    except json.JSONDecodeError as exc:
        logger.error("model_json_invalid", error=str(exc), response=text[:500])
        raise ParseFailure() from exc

    try:
        return schema.model_validate(data)
    except ValidationError as exc:
        logger.error(
            "model_json_schema_mismatch",
            schema=schema.__name__,
            errors=exc.error_count(),
            response=text[:500],
        )
        raise ParseFailure() from exc
