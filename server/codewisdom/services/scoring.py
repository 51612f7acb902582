"""
Legacy Code Index scoring.

Raw measurements are mapped to 0-100 quality sub-scores, combined with fixed
weights, and inverted so that a higher index means more refactoring need.

Two policies apply, chosen only by whether the file has analyzable functions:

- files without functions (headers, interfaces) are judged on comments and
  naming alone, and more documentation is never penalised;
- files with functions are judged on complexity, length, comments and naming,
  with comment coverage scored on a bell curve around the ideal ratio.
"""

from typing import Sequence, Tuple

from codewisdom.config import (
    COMMENT_IDEAL_RATIO,
    COMMENT_SATURATION_RATIO,
    COMMENT_WEIGHT,
    COMPLEXITY_BEST,
    COMPLEXITY_WEIGHT,
    COMPLEXITY_WORST,
    LENGTH_BEST,
    LENGTH_WEIGHT,
    LENGTH_WORST,
    NAMING_PENALTY_PER_VIOLATION,
    NAMING_WEIGHT,
    NO_FUNCTIONS_COMMENT_WEIGHT,
    NO_FUNCTIONS_NAMING_WEIGHT,
)
from codewisdom.services.analysis_types import (
    FileReport,
    FunctionRecord,
    RawFileMetrics,
    ScoreBreakdown,
)

POLICY_NO_FUNCTIONS = "no_functions"
POLICY_FUNCTIONS = "functions"


def _clamp(score: float) -> float:
    return max(0.0, min(100.0, score))


def _linear_decay(value: float, best: float, worst: float) -> float:
    return _clamp(100.0 - (value - best) / (worst - best) * 100.0)


def complexity_score(avg_complexity: float) -> float:
    return _linear_decay(avg_complexity, COMPLEXITY_BEST, COMPLEXITY_WORST)


def length_score(avg_length: float) -> float:
    return _linear_decay(avg_length, LENGTH_BEST, LENGTH_WORST)


def comment_bell_score(coverage_ratio: float) -> float:
    return _clamp(100.0 - abs(coverage_ratio - COMMENT_IDEAL_RATIO) / COMMENT_IDEAL_RATIO * 100.0)


def comment_ramp_score(coverage_ratio: float) -> float:
    return _clamp(coverage_ratio / COMMENT_SATURATION_RATIO * 100.0)


def naming_score(naming_violations: int) -> float:
    return _clamp(100.0 - naming_violations * NAMING_PENALTY_PER_VIOLATION)


def calculate_scores(
    has_functions: bool,
    avg_function_complexity: float,
    avg_function_length: float,
    comment_coverage_ratio: float,
    naming_violations: int,
) -> ScoreBreakdown:
    naming = naming_score(naming_violations)

    if not has_functions:
        comment = comment_ramp_score(comment_coverage_ratio)
        quality = comment * NO_FUNCTIONS_COMMENT_WEIGHT + naming * NO_FUNCTIONS_NAMING_WEIGHT
        return ScoreBreakdown(
            policy=POLICY_NO_FUNCTIONS,
            comment_score=comment,
            naming_score=naming,
            quality=quality,
            legacy_index=100.0 - quality,
        )

    complexity = complexity_score(avg_function_complexity)
    length = length_score(avg_function_length)
    comment = comment_bell_score(comment_coverage_ratio)
    quality = (
        complexity * COMPLEXITY_WEIGHT
        + length * LENGTH_WEIGHT
        + comment * COMMENT_WEIGHT
        + naming * NAMING_WEIGHT
    )
    return ScoreBreakdown(
        policy=POLICY_FUNCTIONS,
        comment_score=comment,
        naming_score=naming,
        quality=quality,
        legacy_index=100.0 - quality,
        complexity_score=complexity,
        length_score=length,
    )


def function_averages(functions: Sequence[FunctionRecord]) -> Tuple[float, float]:
    """Return (average length, average complexity); zeros when there are none."""
    if not functions:
        return 0.0, 0.0
    total_length = sum(func.line_count for func in functions)
    total_complexity = sum(func.complexity for func in functions)
    return total_length / len(functions), total_complexity / len(functions)


def comment_coverage(comment_lines: int, total_lines: int) -> float:
    if total_lines <= 0:
        return 0.0
    return comment_lines / total_lines * 100.0


def score_file(path: str, language: str, raw: RawFileMetrics) -> FileReport:
    """Derive the aggregates from raw metrics and compute the index from scratch."""
    avg_length, avg_complexity = function_averages(raw.functions)
    coverage = comment_coverage(raw.comment_lines, raw.total_lines)
    scores = calculate_scores(
        has_functions=bool(raw.functions),
        avg_function_complexity=avg_complexity,
        avg_function_length=avg_length,
        comment_coverage_ratio=coverage,
        naming_violations=raw.naming_violations,
    )
    return FileReport(
        path=path,
        language=language,
        functions=tuple(raw.functions),
        total_lines=raw.total_lines,
        comment_lines=raw.comment_lines,
        avg_function_length=avg_length,
        avg_function_complexity=avg_complexity,
        comment_coverage_ratio=coverage,
        naming_violations=raw.naming_violations,
        legacy_index=scores.legacy_index,
        scores=scores,
    )
