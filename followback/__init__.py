"""Followers/following reconciliation.

This package turns two relationship lists in any of the supported formats
(JSON data export, exported HTML, pasted text) into canonical handles and
reports who is not following back:
- Normalizing profile URLs, @handles and names to one handle form
- Extracting candidates from messy, redundant, timestamped documents
- Reconciling the two sides and shaping an exportable report
"""

from .analyzer import RelationshipAnalyzer, analyze_documents
from .normalizer import normalize_handle
from .resolver import IdentifierSet, resolve
from .reconciler import reconcile
from .reporter import build_report, save_export
from .models import (
    Side,
    SourceKind,
    RawCandidate,
    RelationshipReport,
    ExportRecord,
    AnalysisResult,
)

__all__ = [
    "RelationshipAnalyzer",
    "analyze_documents",
    "normalize_handle",
    "IdentifierSet",
    "resolve",
    "reconcile",
    "build_report",
    "save_export",
    "Side",
    "SourceKind",
    "RawCandidate",
    "RelationshipReport",
    "ExportRecord",
    "AnalysisResult",
]

__version__ = "0.1.0"
