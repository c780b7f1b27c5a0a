"""Extractor for structured JSON data exports.

A followers/following export normally looks like::

    {
      "relationships_following": [
        {"string_list_data": [
            {"href": "https://www.instagram.com/jane.doe", "value": "jane.doe",
             "timestamp": 1700000000}
        ]}
      ]
    }

but hand-edited files and older exports drift from that shape. Decoding is
therefore a fixed, ordered list of decoders; the first one that produces a
usable handle wins.
"""

import json
import math
from typing import Any, Callable, List, Optional, Tuple, Union

from ..error_handling import MalformedInputError
from ..logging_config import get_logger
from ..models import RawCandidate, Side, SourceKind, Timestamp
from ..normalizer import normalize_handle
from .base import Extractor

logger = get_logger(__name__)

STRING_LIST_KEY = "string_list_data"
ITEM_FIELDS = ("href", "value")
FLAT_RECORD_FIELDS = ("href", "username", "value")


def _reject_constant(name: str):
    # NaN and Infinity are not JSON even though the json module accepts them
    raise ValueError(f"invalid constant {name!r}")


def _first_string(obj: dict, fields: Tuple[str, ...]) -> Optional[str]:
    for field in fields:
        value = obj.get(field)
        if isinstance(value, str) and value:
            return value
    return None


def _timestamp(obj: dict) -> Optional[Timestamp]:
    value = obj.get("timestamp")
    # bool is an int subclass; NaN/inf cannot be ordered
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


def candidates_from_records(records: Any) -> List[RawCandidate]:
    """Apply the per-record rule to a list of records.

    Records with a ``string_list_data`` list give one candidate per item
    (``href`` then ``value``). Other object records are treated as flat and
    give one candidate (``href``, ``username``, then ``value``). Anything that
    is not an object is skipped.
    """
    if not isinstance(records, list):
        return []

    candidates = []
    for record in records:
        if not isinstance(record, dict):
            continue

        items = record.get(STRING_LIST_KEY)
        if isinstance(items, list):
            for item in items:
                if not isinstance(item, dict):
                    continue
                value = _first_string(item, ITEM_FIELDS)
                if value is not None:
                    candidates.append(RawCandidate(value, _timestamp(item)))
        else:
            value = _first_string(record, FLAT_RECORD_FIELDS)
            if value is not None:
                candidates.append(RawCandidate(value, _timestamp(record)))

    return candidates


def decode_canonical(data: Any, canonical_key: str) -> List[RawCandidate]:
    """Records under the side's canonical top-level key."""
    if not isinstance(data, dict) or canonical_key not in data:
        return []
    return candidates_from_records(data[canonical_key])


def decode_top_level_array(data: Any, canonical_key: str) -> List[RawCandidate]:
    """The whole document is the list of records."""
    if not isinstance(data, list):
        return []
    return candidates_from_records(data)


def decode_array_properties(data: Any, canonical_key: str) -> List[RawCandidate]:
    """Every array-valued top-level property, in document order."""
    if not isinstance(data, dict):
        return []

    candidates = []
    for value in data.values():
        if isinstance(value, list):
            candidates.extend(candidates_from_records(value))
    return candidates


Decoder = Callable[[Any, str], List[RawCandidate]]

DECODERS: Tuple[Tuple[str, Decoder], ...] = (
    ("canonical", decode_canonical),
    ("top_level_array", decode_top_level_array),
    ("array_properties", decode_array_properties),
)


class JSONExtractor(Extractor):
    """Extractor for JSON exports."""

    source_kind = SourceKind.JSON

    def canonical_key(self, side: Union[Side, str]) -> str:
        return self.platform.canonical_keys[Side(side)]

    def parse(self, document: str, side: Union[Side, str]) -> Any:
        """Parse the document, naming the side in any failure."""
        side_name = Side(side).value
        if not isinstance(document, (str, bytes, bytearray)):
            raise MalformedInputError(
                f"Invalid JSON format for {side_name}: expected text, got {type(document).__name__}",
                side=side_name,
                source_kind=self.source_kind.value,
            )
        try:
            return json.loads(document, parse_constant=_reject_constant)
        except (ValueError, RecursionError) as e:
            # ValueError covers JSONDecodeError and UnicodeDecodeError
            raise MalformedInputError(
                f"Invalid JSON format for {side_name}: {e}",
                side=side_name,
                source_kind=self.source_kind.value,
            ) from e

    def decode(self, data: Any, side: Union[Side, str]) -> Tuple[Optional[str], List[RawCandidate]]:
        """Run the decoders in order over already-parsed data.

        Returns:
            Name of the decoder that produced usable handles (None if none did)
            and its candidates
        """
        canonical_key = self.canonical_key(side)

        for name, decoder in DECODERS:
            candidates = decoder(data, canonical_key)
            if any(normalize_handle(c.value, self.domain) for c in candidates):
                return name, candidates

        return None, []

    def extract(self, document: str, side: Union[Side, str]) -> List[RawCandidate]:
        """Extract candidates from a JSON export."""
        side = Side(side)
        data = self.parse(document, side)
        decoder_name, candidates = self.decode(data, side)

        logger.info(
            f"Extracted {len(candidates)} {side.value} candidates from JSON",
            extra={"side": side.value, "decoder": decoder_name, "candidates": len(candidates)},
        )
        return candidates
