import concurrent.futures
import logging
import os
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from pathspec import GitIgnoreSpec

from codewisdom.config import (
    DEFAULT_MAX_WORKERS,
    FILE_TIMEOUT_SECONDS,
    IGNORE_DIRS,
    IGNORE_FILES,
)
from codewisdom.services.analysis_types import FileReport
from codewisdom.services.errors import UnsupportedLanguageError
from codewisdom.services.languages import get_profile
from codewisdom.services.metrics import extract_metrics
from codewisdom.services.ranking import rank_reports
from codewisdom.services.scoring import score_file
from codewisdom.services.tree_sitter_parser import language_for_path, parse

logger = logging.getLogger(__name__)

# Either a finished report or {"error": ..., "kind": ..., "filename": ...}
AnalysisResult = Union[FileReport, Dict[str, str]]


def analyze_source(source: bytes, path: str, language: str) -> FileReport:
    """Parse, measure and score one file's contents."""
    profile = get_profile(language)
    tree = parse(source, language, path)
    raw = extract_metrics(tree.root_node, profile, source)
    return score_file(path, language, raw)


def analyze_file(file_path: str) -> FileReport:
    language = language_for_path(file_path)
    if language is None:
        raise UnsupportedLanguageError(file_path)

    with open(file_path, 'rb') as f:
        content = f.read()

    return analyze_source(content, file_path, language)


def analyze_single_file(file_path: str) -> AnalysisResult:
    """
    Wrapper to analyze a single file safely.
    Must be top-level for multiprocessing pickling.
    """
    try:
        return analyze_file(file_path)
    except Exception as e:
        # Return error info instead of crashing the pool
        return {"error": str(e), "kind": type(e).__name__, "filename": file_path}


def find_repo_root(start_path: Path) -> Path:
    current = start_path.resolve()
    for parent in [current, *current.parents]:
        if (parent / ".git").exists():
            return parent
    return current


def _translate_gitignore_pattern(raw_line: str, base_rel: str) -> Optional[str]:
    """
    Rewrite a pattern from the .gitignore in directory `base_rel` so that it
    matches paths relative to the repository root.
    """
    line = raw_line.rstrip("\n")
    if not line.strip() or line.lstrip().startswith("#"):
        return None

    negated = line.startswith("!")
    body = line[1:] if negated else line
    anchored = body.startswith("/")
    body = body.lstrip("/")

    if base_rel:
        if anchored or "/" in body.rstrip("/"):
            pattern = f"{base_rel}/{body}"
        else:
            pattern = f"{base_rel}/**/{body}"
    else:
        pattern = f"/{body}" if anchored else body

    return f"!{pattern}" if negated else pattern


def _load_gitignore_spec(root_path: Path) -> Tuple[Path, Optional[GitIgnoreSpec]]:
    """
    Collect every .gitignore from the enclosing repository into one spec keyed
    on the repository root, so scanning a subdirectory still honours rules
    declared above it.
    """
    repo_root = find_repo_root(root_path)
    patterns: List[str] = []

    for dirpath, dirnames, filenames in os.walk(repo_root):
        dirnames[:] = [d for d in dirnames if d not in IGNORE_DIRS]
        if ".gitignore" not in filenames:
            continue

        directory = Path(dirpath)
        base_rel = "" if directory == repo_root else directory.relative_to(repo_root).as_posix()
        with open(directory / ".gitignore", "r", encoding="utf-8", errors="replace") as f:
            for raw in f:
                translated = _translate_gitignore_pattern(raw, base_rel)
                if translated is not None:
                    patterns.append(translated)

    if not patterns:
        return repo_root, None
    return repo_root, GitIgnoreSpec.from_lines(patterns)


def _is_gitignored(path: Path, ignore_root: Path, spec: Optional[GitIgnoreSpec], is_dir: bool = False) -> bool:
    if spec is None:
        return False
    try:
        rel = path.resolve().relative_to(ignore_root)
    except ValueError:
        return False
    rel_str = rel.as_posix()
    if is_dir:
        rel_str += "/"
    return spec.match_file(rel_str)


def collect_source_files(root_path: Path) -> List[str]:
    """
    Walk `root_path` and return the files with a supported language, in a
    stable (sorted) discovery order.
    """
    ignore_root, gitignore_spec = _load_gitignore_spec(root_path)
    files_to_scan: List[str] = []

    for root_dir, dirs, files in os.walk(root_path):
        root_dir_path = Path(root_dir)

        # Prune in place so os.walk skips ignored subtrees entirely
        dirs[:] = sorted(
            d for d in dirs
            if d not in IGNORE_DIRS
            and not _is_gitignored(root_dir_path / d, ignore_root, gitignore_spec, is_dir=True)
        )

        for file in sorted(files):
            if file in IGNORE_FILES:
                continue
            file_path = root_dir_path / file
            if language_for_path(file_path) is None:
                logger.debug("Skipping unsupported file %s", file_path)
                continue
            if _is_gitignored(file_path, ignore_root, gitignore_spec):
                continue
            files_to_scan.append(str(file_path))

    return files_to_scan


def _run_file_analyses(
    files_to_scan: List[str],
    max_workers: int,
    timeout_seconds: float,
) -> List[Optional[AnalysisResult]]:
    """
    Analyze every file and return one result per input, in input order.
    A None entry marks a file whose analysis timed out or whose worker died.
    """
    total_count = len(files_to_scan)

    if max_workers <= 1:
        results: List[Optional[AnalysisResult]] = []
        for index, file_path in enumerate(files_to_scan, start=1):
            results.append(analyze_single_file(file_path))
            print(f"✅ [{index}/{total_count}] Analyzed {file_path}", flush=True)
        return results

    results = []
    timed_out = False
    executor = concurrent.futures.ProcessPoolExecutor(max_workers=max_workers)
    try:
        futures = [executor.submit(analyze_single_file, f) for f in files_to_scan]

        for index, (file_path, future) in enumerate(zip(files_to_scan, futures), start=1):
            try:
                results.append(future.result(timeout=timeout_seconds))
                print(f"✅ [{index}/{total_count}] Analyzed {file_path}", flush=True)
            except concurrent.futures.TimeoutError:
                timed_out = True
                future.cancel()
                print(f"❌ [{index}/{total_count}] Timeout analyzing {file_path} (skipped)", flush=True)
                results.append(None)
            except Exception as exc:
                # A dead worker breaks the pool; every pending file lands here
                logger.warning("Worker failed on %s: %s", file_path, exc)
                print(f"❌ [{index}/{total_count}] Exception analyzing {file_path}: {exc}", flush=True)
                results.append(None)
    finally:
        # Running tasks cannot be cancelled; do not wait on a hung worker
        executor.shutdown(wait=not timed_out, cancel_futures=timed_out)

    return results


def scan_codebase(root_path: Path, max_workers: int = DEFAULT_MAX_WORKERS) -> List[FileReport]:
    """
    Analyze a file or every supported file under a directory and return the
    reports ranked worst first. Files that fail to parse are reported and
    skipped; only a missing root is fatal.
    """
    if not root_path.exists():
        raise FileNotFoundError(f"Path does not exist: {root_path}")

    print(f"🔍 Scanning: {root_path}", flush=True)

    if root_path.is_file():
        files_to_scan = [str(root_path)] if language_for_path(root_path) else []
    else:
        files_to_scan = collect_source_files(root_path)

    print(f"📂 Analyzing {len(files_to_scan)} source files...", flush=True)

    reports: List[FileReport] = []
    for result in _run_file_analyses(files_to_scan, max_workers, FILE_TIMEOUT_SECONDS):
        if result is None:
            continue
        if isinstance(result, dict):
            logger.warning("Skipping %s: %s", result["filename"], result["error"])
            print(f"❌ Error analyzing {result['filename']}: {result['error']}", flush=True)
            continue
        reports.append(result)

    return rank_reports(reports)
