from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

ANONYMOUS_FUNCTION_NAME = "[anonymous function]"
EXTRACTION_FAILED_NAME = "[extraction_failed]"


class NameStatus(str, Enum):
    FOUND = "found"
    ANONYMOUS = "anonymous"
    FAILED = "failed"


@dataclass(frozen=True)
class ExtractedName:
    """
    Result of pulling a function's identifier out of its definition node.

    Fallbacks are kept as a status rather than a magic string; `display()` is
    the only place the placeholder text is produced.
    """

    status: NameStatus
    text: str = ""

    @classmethod
    def found(cls, text: str) -> "ExtractedName":
        if not text:
            return cls.failed()
        return cls(NameStatus.FOUND, text)

    @classmethod
    def anonymous(cls) -> "ExtractedName":
        return cls(NameStatus.ANONYMOUS)

    @classmethod
    def failed(cls) -> "ExtractedName":
        return cls(NameStatus.FAILED)

    def display(self) -> str:
        if self.status is NameStatus.FOUND:
            return self.text
        if self.status is NameStatus.ANONYMOUS:
            return ANONYMOUS_FUNCTION_NAME
        return EXTRACTION_FAILED_NAME


@dataclass(frozen=True)
class FunctionRecord:
    extracted_name: ExtractedName
    line_start: int
    line_end: int
    complexity: int = 1

    @property
    def name(self) -> str:
        return self.extracted_name.display()

    @property
    def line_count(self) -> int:
        return self.line_end - self.line_start + 1


@dataclass(frozen=True)
class RawFileMetrics:
    """Measurements taken from one tree, before any scoring."""

    functions: Tuple[FunctionRecord, ...]
    total_lines: int
    comment_lines: int
    naming_violations: int


@dataclass(frozen=True)
class ScoreBreakdown:
    # "no_functions" for headers/interfaces, "functions" for source files.
    policy: str
    comment_score: float
    naming_score: float
    quality: float
    legacy_index: float
    complexity_score: Optional[float] = None
    length_score: Optional[float] = None


@dataclass(frozen=True)
class FileReport:
    path: str
    language: str
    functions: Tuple[FunctionRecord, ...] = field(default_factory=tuple)
    total_lines: int = 0
    comment_lines: int = 0
    avg_function_length: float = 0.0
    avg_function_complexity: float = 0.0
    comment_coverage_ratio: float = 0.0
    naming_violations: int = 0
    legacy_index: float = 0.0
    scores: Optional[ScoreBreakdown] = None
