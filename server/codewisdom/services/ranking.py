from typing import Iterable, List

from codewisdom.services.analysis_types import FileReport


def rank_reports(reports: Iterable[FileReport]) -> List[FileReport]:
    """Worst files first. `sorted` is stable, so ties keep their input order."""
    return sorted(reports, key=lambda report: report.legacy_index, reverse=True)
