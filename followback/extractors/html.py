"""Extractor for exported HTML pages."""

from typing import List, Tuple, Union

from bs4 import BeautifulSoup

from ..error_handling import MalformedInputError
from ..logging_config import get_logger
from ..models import RawCandidate, Side, SourceKind
from ..normalizer import normalize_handle
from .base import Extractor

logger = get_logger(__name__)


class HTMLExtractor(Extractor):
    """Extractor for HTML documents.

    Selector strategies are tried in a fixed priority order and the first one
    that yields anything wins; later strategies are never consulted.
    """

    source_kind = SourceKind.HTML

    def strategies(self) -> Tuple[Tuple[str, str], ...]:
        """Named CSS selectors in priority order."""
        return (
            ("platform_links", f'a[href*="{self.domain}/"]'),
            ("username_attribute", f"[{self.platform.username_attribute}]"),
            ("user_link_class", f".{self.platform.user_link_class}"),
            ("root_relative_links", 'a[href^="/"]'),
            ("all_links", "a"),
        )

    def parse(self, document: str, side: Union[Side, str]) -> BeautifulSoup:
        """Parse into an element tree; scripts are never executed."""
        side_name = Side(side).value
        if not isinstance(document, str):
            raise MalformedInputError(
                f"Invalid HTML format for {side_name}: expected text, got {type(document).__name__}",
                side=side_name,
                source_kind=self.source_kind.value,
            )
        try:
            return BeautifulSoup(document, "html.parser")
        except Exception as e:
            raise MalformedInputError(
                f"Invalid HTML format for {side_name}: {e}",
                side=side_name,
                source_kind=self.source_kind.value,
            ) from e

    def _candidate_from_element(self, element) -> str:
        # One candidate per element: href, then the data attribute, then the text
        for raw in (
            element.get("href"),
            element.get(self.platform.username_attribute),
            element.get_text(),
        ):
            if isinstance(raw, list):
                raw = " ".join(raw)
            handle = normalize_handle(raw, self.domain)
            if handle:
                return handle
        return ""

    def extract(self, document: str, side: Union[Side, str]) -> List[RawCandidate]:
        """Extract candidates from an HTML document."""
        side = Side(side)
        soup = self.parse(document, side)

        strategy_name = None
        handles: List[str] = []
        for name, selector in self.strategies():
            handles = [self._candidate_from_element(el) for el in soup.select(selector)]
            handles = [h for h in handles if h]
            if handles:
                strategy_name = name
                break

        seen = set()
        candidates = []
        for handle in handles:
            if handle == self.domain or handle in seen:
                continue
            seen.add(handle)
            candidates.append(RawCandidate(handle))

        logger.info(
            f"Extracted {len(candidates)} {side.value} candidates from HTML",
            extra={"side": side.value, "strategy": strategy_name, "candidates": len(candidates)},
        )
        return candidates
