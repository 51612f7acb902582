from typing import List, Optional
from pydantic import BaseModel, Field

from codewisdom.services.analysis_types import FileReport, FunctionRecord, ScoreBreakdown


class FunctionSummary(BaseModel):
    name: str
    name_status: str  # "found", "anonymous", "failed"
    line_start: int
    line_end: int
    line_count: int
    complexity: int

    @classmethod
    def from_record(cls, record: FunctionRecord) -> "FunctionSummary":
        return cls(
            name=record.name,
            name_status=record.extracted_name.status.value,
            line_start=record.line_start,
            line_end=record.line_end,
            line_count=record.line_count,
            complexity=record.complexity,
        )


class Scores(BaseModel):
    policy: str
    comment_score: float
    naming_score: float
    quality: float
    # Only present for files with functions
    complexity_score: Optional[float] = None
    length_score: Optional[float] = None

    @classmethod
    def from_breakdown(cls, breakdown: ScoreBreakdown) -> "Scores":
        return cls(
            policy=breakdown.policy,
            comment_score=breakdown.comment_score,
            naming_score=breakdown.naming_score,
            quality=breakdown.quality,
            complexity_score=breakdown.complexity_score,
            length_score=breakdown.length_score,
        )


class FileReportModel(BaseModel):
    path: str
    language: str
    legacy_index: float
    total_lines: int
    comment_lines: int
    comment_coverage_ratio: float
    avg_function_length: float
    avg_function_complexity: float
    naming_violations: int
    scores: Optional[Scores] = None
    # Use default_factory to avoid sharing the same list across instances
    functions: List[FunctionSummary] = Field(default_factory=list)

    @classmethod
    def from_report(cls, report: FileReport) -> "FileReportModel":
        return cls(
            path=report.path,
            language=report.language,
            legacy_index=report.legacy_index,
            total_lines=report.total_lines,
            comment_lines=report.comment_lines,
            comment_coverage_ratio=report.comment_coverage_ratio,
            avg_function_length=report.avg_function_length,
            avg_function_complexity=report.avg_function_complexity,
            naming_violations=report.naming_violations,
            scores=Scores.from_breakdown(report.scores) if report.scores else None,
            functions=[FunctionSummary.from_record(f) for f in report.functions],
        )


class RankingResponse(BaseModel):
    root: str
    file_count: int
    # Worst file first
    files: List[FileReportModel] = Field(default_factory=list)

    @classmethod
    def from_reports(cls, root: str, reports: List[FileReport]) -> "RankingResponse":
        return cls(
            root=root,
            file_count=len(reports),
            files=[FileReportModel.from_report(r) for r in reports],
        )
