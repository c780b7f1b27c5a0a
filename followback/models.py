"""Data models for followback."""

from typing import Dict, List, Optional, Union
from datetime import datetime, timezone
from dataclasses import dataclass
from enum import Enum
from pydantic import BaseModel, Field, ConfigDict, field_validator


# Recency markers come from export records; floats are accepted as the exports
# are not strict about the type.
Timestamp = Union[int, float]


class Side(str, Enum):
    """Which relationship list a document describes."""

    FOLLOWERS = "followers"
    FOLLOWING = "following"


class SourceKind(str, Enum):
    """Declared format of an input document."""

    JSON = "json"
    HTML = "html"
    TEXT = "text"


@dataclass(frozen=True)
class RawCandidate:
    """An untrusted identifier pulled out of a document.

    ``timestamp`` is None when the source carried no recency evidence; it is
    never defaulted to zero.
    """

    value: str
    timestamp: Optional[Timestamp] = None


class RelationshipReport(BaseModel):
    """The relationship diff between the two resolved sides."""

    followers: List[str] = Field(default_factory=list)
    following: List[str] = Field(default_factory=list)
    not_following_back: List[str] = Field(default_factory=list)
    mutual_followers: List[str] = Field(default_factory=list)

    @property
    def followers_count(self) -> int:
        return len(self.followers)

    @property
    def following_count(self) -> int:
        return len(self.following)

    @property
    def not_following_back_count(self) -> int:
        return len(self.not_following_back)

    @property
    def mutual_followers_count(self) -> int:
        return len(self.mutual_followers)


class ExportSummary(BaseModel):
    """Summary block of the exported analysis."""

    total_followers: int
    total_following: int
    not_following_back_count: int
    mutual_followers_count: int
    follow_ratio: str


class ExportRecord(BaseModel):
    """Everything written to the exported analysis file."""

    generated_at: datetime
    summary: ExportSummary
    not_following_back: List[str] = Field(default_factory=list)
    mutual_followers: List[str] = Field(default_factory=list)

    def to_export_dict(self) -> Dict[str, object]:
        """Plain key/value form with ``generated_at`` as a UTC ISO-8601 string."""
        generated = self.generated_at
        if generated.tzinfo is None:
            generated = generated.replace(tzinfo=timezone.utc)
        generated = generated.astimezone(timezone.utc)

        return {
            "generated_at": generated.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "summary": self.summary.model_dump(),
            "not_following_back": list(self.not_following_back),
            "mutual_followers": list(self.mutual_followers),
        }


class Diagnostic(BaseModel):
    """A non-fatal observation about an analysis run."""

    code: str
    message: str
    samples: Dict[str, List[str]] = Field(default_factory=dict)


class AnalysisResult(BaseModel):
    """Result of running both documents through the pipeline."""

    report: RelationshipReport
    followers_kind: SourceKind
    following_kind: SourceKind
    diagnostics: List[Diagnostic] = Field(default_factory=list)
    processing_time: Optional[float] = None

    model_config = ConfigDict(use_enum_values=True)

    @property
    def has_data(self) -> bool:
        """False when neither side produced a single handle."""
        return bool(self.report.followers or self.report.following)


class PlatformConfig(BaseModel):
    """What the target platform's exports look like."""

    domain: str = "instagram.com"
    user_link_class: str = "user-link"
    username_attribute: str = "data-username"
    canonical_keys: Dict[Side, str] = Field(
        default_factory=lambda: {
            Side.FOLLOWERS: "relationships_followers",
            Side.FOLLOWING: "relationships_following",
        }
    )

    @field_validator("domain")
    @classmethod
    def clean_domain(cls, v: str) -> str:
        """Store the bare host, lowercase and without slashes."""
        v = v.strip().strip("/").lower()
        if not v:
            raise ValueError("domain must not be empty")
        return v


class ProcessingConfig(BaseModel):
    """Processing configuration."""

    max_input_bytes: int = Field(default=10 * 1024 * 1024, gt=0)
    parallel_extraction: bool = False
    warn_on_mismatch: bool = True


class ExportConfig(BaseModel):
    """Export configuration."""

    filename_prefix: str = "instagram-analysis"
    output_dir: str = "."
    indent: int = 2


class LoggingConfig(BaseModel):
    """Logging configuration."""

    format: str = "text"
    level: str = "INFO"
    log_file: Optional[str] = None

    @field_validator("format")
    @classmethod
    def check_format(cls, v: str) -> str:
        if v not in ("json", "text"):
            raise ValueError("format must be 'json' or 'text'")
        return v


class Config(BaseModel):
    """Complete configuration model."""

    platform: PlatformConfig = Field(default_factory=PlatformConfig)
    processing: ProcessingConfig = Field(default_factory=ProcessingConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
