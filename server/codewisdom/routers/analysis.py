from fastapi import APIRouter, HTTPException, Query
from pathlib import Path

from codewisdom.config import DEFAULT_MAX_WORKERS
from codewisdom.models import FileReportModel, RankingResponse
from codewisdom.services import analysis
from codewisdom.services.errors import ParseFailureError, UnsupportedLanguageError

router = APIRouter(prefix="/api/analysis", tags=["analysis"])

ROOT_PATH = Path.cwd()


@router.get("", response_model=RankingResponse)
async def get_analysis(
    path: str = None,
    workers: int = Query(DEFAULT_MAX_WORKERS, ge=1, description="Worker processes for the scan"),
):
    """
    Rank every supported file under `path` (default: the server's working
    directory) by Legacy Code Index, worst first.
    """
    target_path = Path(path) if path else ROOT_PATH
    if not target_path.exists():
        raise HTTPException(status_code=404, detail="Path not found")

    reports = analysis.scan_codebase(target_path, max_workers=workers)
    return RankingResponse.from_reports(str(target_path), reports)


@router.get("/file", response_model=FileReportModel)
async def get_file_analysis(path: str = Query(..., description="Path to a source file")):
    """
    Analyze a single source file.
    """
    file_path = Path(path)

    if not file_path.exists():
        raise HTTPException(status_code=404, detail="File not found")

    if not file_path.is_file():
        raise HTTPException(status_code=400, detail="Path is not a file")

    try:
        report = analysis.analyze_file(str(file_path))
    except UnsupportedLanguageError:
        raise HTTPException(status_code=415, detail="Unsupported language")
    except ParseFailureError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return FileReportModel.from_report(report)
