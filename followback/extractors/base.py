"""Base extractor and registry."""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Union

from ..models import PlatformConfig, RawCandidate, Side, SourceKind
from ..error_handling import UnsupportedSourceKindError


class Extractor(ABC):
    """Turns one raw document into raw identifier candidates.

    Extractors never touch the network or the disk. They raise
    ``MalformedInputError`` when the document cannot be parsed at all and
    otherwise return whatever they found, possibly nothing.
    """

    source_kind: SourceKind

    def __init__(self, platform: Optional[PlatformConfig] = None):
        """Initialize extractor."""
        if not hasattr(self, "source_kind"):
            raise NotImplementedError("Extractor must define source_kind")
        self.platform = platform or PlatformConfig()

    @property
    def domain(self) -> str:
        return self.platform.domain

    @abstractmethod
    def extract(self, document: str, side: Union[Side, str]) -> List[RawCandidate]:
        """Extract candidates from a document.

        Args:
            document: The already-read document text
            side: Which list the document describes

        Returns:
            Candidates in document order

        Raises:
            MalformedInputError: If the document cannot be parsed
        """
        pass


class ExtractorRegistry:
    """Registry of extractors keyed by source kind."""

    def __init__(self, platform: Optional[PlatformConfig] = None):
        """Initialize registry."""
        self.platform = platform or PlatformConfig()
        self._extractors: Dict[SourceKind, Extractor] = {}
        self._initialized = False

    def register(self, extractor: Extractor) -> None:
        """Register an extractor, replacing any other for the same kind.

        Args:
            extractor: Extractor to register
        """
        if not isinstance(extractor, Extractor):
            raise TypeError("Extractor must be an Extractor instance")

        self._extractors[extractor.source_kind] = extractor

    def get_extractor(self, source_kind: Union[SourceKind, str]) -> Extractor:
        """Get the extractor for a declared source kind.

        Args:
            source_kind: Declared kind of the document

        Returns:
            The registered extractor

        Raises:
            UnsupportedSourceKindError: If the kind is unknown or unregistered
        """
        if not self._initialized:
            self._auto_register_extractors()

        if not isinstance(source_kind, SourceKind):
            try:
                source_kind = SourceKind(str(source_kind).lower())
            except ValueError:
                raise UnsupportedSourceKindError(source_kind)

        if source_kind not in self._extractors:
            raise UnsupportedSourceKindError(source_kind.value)

        return self._extractors[source_kind]

    def _auto_register_extractors(self) -> None:
        """Register the built-in extractors without overriding explicit ones."""
        # Import here to avoid circular imports
        from .json_export import JSONExtractor
        from .html import HTMLExtractor
        from .text import TextExtractor

        for extractor in (
            JSONExtractor(self.platform),
            HTMLExtractor(self.platform),
            TextExtractor(self.platform),
        ):
            self._extractors.setdefault(extractor.source_kind, extractor)

        self._initialized = True

    def extract(
        self,
        document: str,
        source_kind: Union[SourceKind, str],
        side: Union[Side, str],
    ) -> List[RawCandidate]:
        """Extract candidates using the extractor for ``source_kind``."""
        return self.get_extractor(source_kind).extract(document, side)
