"""Main orchestrator for the relationship analysis pipeline."""

import time
import uuid
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional, Union

from .config import ConfigManager
from .error_handling import ErrorContext, FollowbackError, MalformedInputError
from .extractors import ExtractorRegistry
from .logging_config import (
    Timer,
    current_log_context,
    get_logger,
    log_context,
    log_performance,
)
from .models import AnalysisResult, Config, RawCandidate, Side, SourceKind
from .reconciler import detect_normalization_mismatch, reconcile
from .resolver import IdentifierSet, resolve

logger = get_logger(__name__)


class RelationshipAnalyzer:
    """Runs two documents through extract, resolve and reconcile."""

    def __init__(
        self, config: Optional[Config] = None, config_path: Optional[str] = None
    ):
        """Initialize the analyzer.

        Args:
            config: Config object (takes precedence)
            config_path: Path to config file
        """
        if config is not None:
            self.config = config
        else:
            self.config = ConfigManager(config_path).load()

        self.registry = ExtractorRegistry(self.config.platform)

    def extract_side(
        self,
        document: str,
        source_kind: Union[SourceKind, str],
        side: Union[Side, str],
    ) -> List[RawCandidate]:
        """Extract the raw candidates of one side.

        Raises:
            MalformedInputError: If the document cannot be parsed
            UnsupportedSourceKindError: If the kind is unknown
        """
        side = Side(side)
        extractor = self.registry.get_extractor(source_kind)
        kind = extractor.source_kind.value

        with ErrorContext("extract", side=side.value, source_kind=kind):
            try:
                return extractor.extract(document, side)
            except FollowbackError:
                raise
            except Exception as e:
                raise MalformedInputError(
                    f"Invalid {kind} input for {side.value}: {e}",
                    side=side.value,
                    source_kind=kind,
                    context={"original_error": type(e).__name__},
                ) from e

    def resolve_side(
        self,
        document: str,
        source_kind: Union[SourceKind, str],
        side: Union[Side, str],
    ) -> IdentifierSet:
        """Extract and resolve one side into an IdentifierSet."""
        side = Side(side)
        with Timer() as timer:
            candidates = self.extract_side(document, source_kind, side)
            identifiers = resolve(candidates, self.config.platform.domain)

        log_performance(
            __name__,
            f"resolve_{side.value}",
            timer.duration_ms,
            candidates=len(candidates),
            handles=len(identifiers),
        )
        return identifiers

    def analyze(
        self,
        followers_document: str,
        following_document: str,
        followers_kind: Union[SourceKind, str],
        following_kind: Optional[Union[SourceKind, str]] = None,
    ) -> AnalysisResult:
        """Analyze a followers document against a following document.

        Args:
            followers_document: Text of the followers document
            following_document: Text of the following document
            followers_kind: Declared kind of the followers document
            following_kind: Declared kind of the following document,
                defaults to ``followers_kind``

        Returns:
            AnalysisResult with the report and any diagnostics

        Raises:
            MalformedInputError: If either document cannot be parsed
            UnsupportedSourceKindError: If a kind is unknown
        """
        start_time = time.time()
        followers_kind = self.registry.get_extractor(followers_kind).source_kind
        following_kind = (
            self.registry.get_extractor(following_kind).source_kind
            if following_kind is not None
            else followers_kind
        )

        with log_context(run_id=uuid.uuid4().hex[:12]):
            sides = self._resolve_sides(
                {
                    Side.FOLLOWERS: (followers_document, followers_kind),
                    Side.FOLLOWING: (following_document, following_kind),
                }
            )

            report = reconcile(sides[Side.FOLLOWERS], sides[Side.FOLLOWING])

            diagnostics = []
            mismatch = detect_normalization_mismatch(report)
            if mismatch:
                diagnostics.append(mismatch)
                if self.config.processing.warn_on_mismatch:
                    logger.warning(
                        mismatch.message,
                        extra={
                            "sample_following": mismatch.samples["following"],
                            "sample_followers": mismatch.samples["followers"],
                        },
                    )

            logger.info(
                f"Found {report.not_following_back_count} users not following back",
                extra={
                    "followers": report.followers_count,
                    "following": report.following_count,
                    "not_following_back": report.not_following_back_count,
                    "mutual_followers": report.mutual_followers_count,
                },
            )

        return AnalysisResult(
            report=report,
            followers_kind=followers_kind,
            following_kind=following_kind,
            diagnostics=diagnostics,
            processing_time=time.time() - start_time,
        )

    def _resolve_sides(self, inputs: Dict[Side, tuple]) -> Dict[Side, IdentifierSet]:
        """Resolve both sides, concurrently if configured.

        The sides are independent, so the result is the same either way.
        """
        if not self.config.processing.parallel_extraction:
            return {
                side: self.resolve_side(document, kind, side)
                for side, (document, kind) in inputs.items()
            }

        # log_context is thread-local, so workers re-enter the caller's context
        context = current_log_context()

        def resolve_in_context(document, kind, side):
            with log_context(**context):
                return self.resolve_side(document, kind, side)

        with ThreadPoolExecutor(max_workers=len(inputs)) as executor:
            futures = {
                side: executor.submit(resolve_in_context, document, kind, side)
                for side, (document, kind) in inputs.items()
            }
            # result() re-raises the first extraction failure
            return {side: future.result() for side, future in futures.items()}


def analyze_documents(
    followers_document: str,
    following_document: str,
    followers_kind: Union[SourceKind, str],
    following_kind: Optional[Union[SourceKind, str]] = None,
    config: Optional[Config] = None,
) -> AnalysisResult:
    """Analyze two already-read documents with default or given configuration."""
    analyzer = RelationshipAnalyzer(config=config or Config())
    return analyzer.analyze(
        followers_document, following_document, followers_kind, following_kind
    )
