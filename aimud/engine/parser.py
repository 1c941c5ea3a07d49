"""Tolerant decoding of generative backend replies.

Models asked for JSON still wrap it in markdown fences now and then, so a
reply is decoded in two attempts:

1. the whole text as JSON,
2. the interior of the first ```json fenced block.

Anything else is a FormatError. There is no field-level repair beyond
this: a reply that decodes but lacks fields gets the schema defaults.
"""

import json
import logging
import re
from typing import Any

from pydantic import ValidationError

from aimud.engine.exceptions import FormatError
from aimud.engine.schemas import StructuredResponse

logger = logging.getLogger(__name__)

JSON_FENCE_PATTERN = re.compile(r"```json\s*([\s\S]*?)```", re.IGNORECASE)


class ResponseParser:
    """Converts raw backend text into a StructuredResponse.

    Usage:
        parser = ResponseParser()
        try:
            parsed = parser.parse(raw_text)
        except FormatError as e:
            logger.error(e.raw_text)
    """

    def parse(self, raw_text: str) -> StructuredResponse:
        """Parse a backend reply.

        Args:
            raw_text: The reply exactly as the backend returned it.

        Returns:
            StructuredResponse with absent collections defaulted to empty.

        Raises:
            FormatError: If neither attempt yields a valid JSON object.
        """
        data = self._decode(raw_text)

        if not isinstance(data, dict):
            raise FormatError(
                f"Expected a JSON object, got {type(data).__name__}",
                raw_text=raw_text,
            )

        try:
            return StructuredResponse.model_validate(data)
        except ValidationError as e:
            raise FormatError(f"Reply does not match the response shape: {e}", raw_text=raw_text) from e

    def _decode(self, raw_text: str) -> Any:
        """Decode directly, then from a fenced block."""
        try:
            return json.loads(raw_text)
        except (json.JSONDecodeError, TypeError) as e:
            logger.debug(f"Direct JSON decode failed: {e}")

        match = JSON_FENCE_PATTERN.search(raw_text or "")
        if not match:
            raise FormatError("Reply is neither JSON nor a fenced JSON block", raw_text=raw_text)

        try:
            return json.loads(match.group(1))
        except json.JSONDecodeError as e:
            raise FormatError(f"Fenced JSON block is invalid: {e}", raw_text=raw_text) from e


def parse_response(raw_text: str) -> StructuredResponse:
    """Convenience wrapper around ResponseParser().parse()."""
    return ResponseParser().parse(raw_text)
