import os
import textwrap
import time
from pathlib import Path

import pytest

from codewisdom.services import analysis
from codewisdom.services.analysis_types import FileReport
from codewisdom.services.errors import ParseFailureError, UnsupportedLanguageError

MESSY_PY = textwrap.dedent(
    """
    def tangled(aa, bb):
        for q in aa:
            if q and bb or q > 3:
                while q:
                    q -= 1
            elif q is None:
                try:
                    pass
                except ValueError:
                    pass
        return aa if bb else bb
    """
).strip()

CLEAN_PY = textwrap.dedent(
    """
    # Helpers for greeting people.
    def greet(name):
        # Build the greeting.
        return "hello " + name
    """
).strip()


def _crash_on_bad(file_path: str):
    # Runs inside a pool worker
    if Path(file_path).name == "bad.py":
        os._exit(1)
    return analysis.analyze_file(file_path)


def _hang_on_slow(file_path: str):
    if Path(file_path).name == "slow.py":
        time.sleep(10)
    return analysis.analyze_file(file_path)


def _write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def test_analyze_file_builds_a_full_report(tmp_path: Path) -> None:
    source_file = _write(tmp_path / "clean.py", CLEAN_PY)

    report = analysis.analyze_file(str(source_file))

    assert isinstance(report, FileReport)
    assert report.path == str(source_file)
    assert report.language == "python"
    assert [f.name for f in report.functions] == ["greet"]
    assert report.total_lines == 4
    assert report.comment_lines == 2
    assert report.comment_coverage_ratio == pytest.approx(50.0)
    assert report.naming_violations == 0
    assert 0.0 <= report.legacy_index <= 100.0


def test_analyze_file_is_idempotent(tmp_path: Path) -> None:
    source_file = _write(tmp_path / "messy.py", MESSY_PY)

    assert analysis.analyze_file(str(source_file)) == analysis.analyze_file(str(source_file))


def test_analyze_file_rejects_unsupported_extensions(tmp_path: Path) -> None:
    notes = _write(tmp_path / "notes.txt", "just text")

    with pytest.raises(UnsupportedLanguageError):
        analysis.analyze_file(str(notes))


def test_analyze_file_rejects_syntax_errors(tmp_path: Path) -> None:
    broken = _write(tmp_path / "broken.py", "def broken(:\n")

    with pytest.raises(ParseFailureError):
        analysis.analyze_file(str(broken))


def test_analyze_single_file_wraps_exceptions(tmp_path: Path) -> None:
    """analyze_single_file should return an error dict instead of raising."""
    broken = _write(tmp_path / "broken.py", "def broken(:\n")

    result = analysis.analyze_single_file(str(broken))

    assert isinstance(result, dict)
    assert result["filename"] == str(broken)
    assert result["kind"] == "ParseFailureError"
    assert "parse" in result["error"]


def test_scan_codebase_ranks_worst_first(tmp_path: Path) -> None:
    _write(tmp_path / "clean.py", CLEAN_PY)
    _write(tmp_path / "pkg" / "messy.py", MESSY_PY)
    _write(tmp_path / "README.md", "# not code")

    reports = analysis.scan_codebase(tmp_path, max_workers=1)

    assert [Path(r.path).name for r in reports] == ["messy.py", "clean.py"]
    assert reports[0].legacy_index > reports[1].legacy_index


def test_scan_codebase_skips_files_that_fail_to_parse(tmp_path: Path) -> None:
    _write(tmp_path / "clean.py", CLEAN_PY)
    _write(tmp_path / "broken.py", "def broken(:\n")

    reports = analysis.scan_codebase(tmp_path, max_workers=1)

    assert [Path(r.path).name for r in reports] == ["clean.py"]


def test_scan_codebase_skips_error_results(monkeypatch, tmp_path: Path) -> None:
    """
    scan_codebase should gracefully skip per-file errors and timeouts coming
    back from workers.
    """
    good_file = _write(tmp_path / "good.py", CLEAN_PY)
    _write(tmp_path / "bad.py", CLEAN_PY)
    _write(tmp_path / "slow.py", CLEAN_PY)

    def fake_runner(files_to_scan, max_workers, timeout_seconds):
        out = []
        for file_path in files_to_scan:
            name = Path(file_path).name
            if name == "good.py":
                out.append(FileReport(path=file_path, language="python", legacy_index=12.0))
            elif name == "slow.py":
                out.append(None)
            else:
                out.append({"error": "boom", "kind": "RuntimeError", "filename": file_path})
        return out

    monkeypatch.setattr(analysis, "_run_file_analyses", fake_runner)

    reports = analysis.scan_codebase(tmp_path)

    assert [r.path for r in reports] == [str(good_file)]


def test_scan_codebase_accepts_a_single_file(tmp_path: Path) -> None:
    source_file = _write(tmp_path / "clean.py", CLEAN_PY)

    reports = analysis.scan_codebase(source_file, max_workers=1)

    assert [r.path for r in reports] == [str(source_file)]


def test_scan_codebase_ignores_a_single_unsupported_file(tmp_path: Path) -> None:
    notes = _write(tmp_path / "notes.txt", "just text")

    assert analysis.scan_codebase(notes, max_workers=1) == []


def test_scan_codebase_missing_root_is_fatal(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        analysis.scan_codebase(tmp_path / "missing")


def test_scan_codebase_with_process_pool(tmp_path: Path) -> None:
    _write(tmp_path / "clean.py", CLEAN_PY)
    _write(tmp_path / "messy.py", MESSY_PY)
    _write(tmp_path / "lib.c", "int add(int left, int right) { return left + right; }")

    reports = analysis.scan_codebase(tmp_path, max_workers=2)

    assert sorted(Path(r.path).name for r in reports) == ["clean.py", "lib.c", "messy.py"]
    indexes = [r.legacy_index for r in reports]
    assert indexes == sorted(indexes, reverse=True)


def test_collect_source_files_respects_ignore_rules(tmp_path: Path) -> None:
    repo = tmp_path / "repo"
    (repo / ".git").mkdir(parents=True)
    _write(repo / ".gitignore", "generated/\n*.gen.py\n")
    _write(repo / "src" / "app.py", CLEAN_PY)
    _write(repo / "src" / "models.gen.py", CLEAN_PY)
    _write(repo / "generated" / "out.py", CLEAN_PY)
    _write(repo / "node_modules" / "dep" / "index.js", "function dep() {}")
    _write(repo / "src" / "vendor.min.js", "function v(){}")
    _write(repo / "src" / "nested" / ".gitignore", "/local.py\n")
    _write(repo / "src" / "nested" / "local.py", CLEAN_PY)
    _write(repo / "src" / "nested" / "kept.py", CLEAN_PY)

    files = analysis.collect_source_files(repo)

    relative = sorted(Path(f).relative_to(repo).as_posix() for f in files)
    assert relative == ["src/app.py", "src/nested/kept.py"]


def test_find_repo_root_from_subdirectory(tmp_path: Path) -> None:
    """The repo root is the nearest ancestor containing .git."""
    repo_root = tmp_path / "repo"
    (repo_root / ".git").mkdir(parents=True)
    subdir = repo_root / "subdir" / "nested"
    subdir.mkdir(parents=True)

    assert analysis.find_repo_root(subdir) == repo_root.resolve()


def test_find_repo_root_no_git_falls_back_to_start(tmp_path: Path) -> None:
    start = tmp_path / "no_repo"
    start.mkdir()

    assert analysis.find_repo_root(start) == start.resolve()


def test_declaration_only_typescript_uses_the_no_functions_policy() -> None:
    source = b"declare function foo(a: number): void;\nexport declare function bar(): string;\n"

    report = analysis.analyze_source(source, "types.d.ts", "typescript")

    assert report.functions == ()
    assert report.scores.policy == "no_functions"
    assert report.avg_function_complexity == 0.0


def test_scan_codebase_survives_a_dead_worker(monkeypatch, tmp_path: Path) -> None:
    _write(tmp_path / "bad.py", CLEAN_PY)
    _write(tmp_path / "clean.py", CLEAN_PY)
    _write(tmp_path / "messy.py", MESSY_PY)
    monkeypatch.setattr(analysis, "analyze_single_file", _crash_on_bad)

    reports = analysis.scan_codebase(tmp_path, max_workers=2)

    assert isinstance(reports, list)
    assert all(Path(r.path).name != "bad.py" for r in reports)
    indexes = [r.legacy_index for r in reports]
    assert indexes == sorted(indexes, reverse=True)


def test_run_file_analyses_does_not_wait_for_a_hung_worker(monkeypatch, tmp_path: Path) -> None:
    slow = _write(tmp_path / "slow.py", CLEAN_PY)
    monkeypatch.setattr(analysis, "analyze_single_file", _hang_on_slow)

    started = time.monotonic()
    results = analysis._run_file_analyses([str(slow)], max_workers=2, timeout_seconds=0.5)
    elapsed = time.monotonic() - started

    assert results == [None]
    assert elapsed < 8
