"""Recovery of JSON records embedded in free-form model text."""

import logging
from typing import TypeVar

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


def extract_json_span(text: str) -> str | None:
    """Return the text between the first ``{`` and the last ``}``."""
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end < start:
        return None
    return text[start : end + 1]


def recover_record(
    text: str, model: type[RecordT], default: RecordT
) -> tuple[RecordT, bool]:
    """Parse ``model`` out of ``text``, or return ``default``.

    Returns the record and whether it was recovered from the text. Missing
    braces, malformed JSON and schema mismatches all select the default.
    """
    span = extract_json_span(text)
    if span is None:
        logger.warning(
            "No JSON object in model reply, using defaults",
            extra={"record": model.__name__, "reply_length": len(text)},
        )
        return default, False
    try:
        record = model.model_validate_json(span)
    except ValidationError as exc:
        logger.warning(
            "Model reply did not match schema, using defaults",
            extra={
                "record": model.__name__,
                "reply_length": len(text),
                "error_count": exc.error_count(),
            },
        )
        return default, False
    return record, True
