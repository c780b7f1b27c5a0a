"""Extractor for free-form pasted text."""

import re
from typing import List, Union

from ..error_handling import MalformedInputError
from ..logging_config import get_logger
from ..models import RawCandidate, Side, SourceKind
from ..normalizer import normalize_handle
from .base import Extractor

logger = get_logger(__name__)

_DELIMITERS = re.compile(r"[\n,\s]+")


class TextExtractor(Extractor):
    """Splits pasted text on whitespace, newlines and commas."""

    source_kind = SourceKind.TEXT

    def extract(self, document: str, side: Union[Side, str]) -> List[RawCandidate]:
        side = Side(side)
        if not isinstance(document, str):
            raise MalformedInputError(
                f"Invalid text input for {side.value}: expected text, got {type(document).__name__}",
                side=side.value,
                source_kind=self.source_kind.value,
            )
        if not document.strip():
            return []

        seen = set()
        candidates = []
        for token in _DELIMITERS.split(document):
            handle = normalize_handle(token, self.domain)
            if handle and handle not in seen:
                seen.add(handle)
                candidates.append(RawCandidate(handle))

        logger.info(
            f"Extracted {len(candidates)} {side.value} candidates from text",
            extra={"side": side.value, "candidates": len(candidates)},
        )
        return candidates
