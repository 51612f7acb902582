import argparse
import contextlib
import logging
import os
import sys
from pathlib import Path

from rich.console import Console

from codewisdom.config import DEFAULT_MAX_WORKERS
from codewisdom.models import RankingResponse
from codewisdom.services.analysis import scan_codebase
from codewisdom.services.report import render_ranking


def _serve(target_path: Path, host: str, port: int) -> None:
    import uvicorn

    # Change working directory so the API defaults to this path.
    os.chdir(target_path if target_path.is_dir() else target_path.parent)
    print(f"🚀 Starting server at http://{host}:{port}")
    print("   Press Ctrl+C to stop.")
    uvicorn.run(
        "codewisdom.main:app",
        host=host,
        port=port,
        reload=False,
    )


def main(argv: list[str] | None = None) -> None:
    """
    Entry point for the CLI.

    - Analyzes a single file or every supported file under a directory.
    - Prints the files ranked by Legacy Code Index, worst first.
    - Optionally emits JSON instead, or serves the ranking over HTTP.
    """
    parser = argparse.ArgumentParser(
        prog="codewisdom",
        description=(
            "Rank source files by Legacy Code Index (higher means more "
            "refactoring need). By default, analyzes the current working directory."
        ),
    )
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Source file or directory to analyze (default: current directory).",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the ranking as JSON instead of a colour report.",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=DEFAULT_MAX_WORKERS,
        help=f"Worker processes used for analysis (default: {DEFAULT_MAX_WORKERS}; 1 disables the pool).",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log skipped files and other diagnostics.",
    )
    parser.add_argument(
        "--serve",
        action="store_true",
        help="Start the HTTP API instead of printing a report.",
    )
    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host interface to bind the server to (default: 127.0.0.1).",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to run the server on (default: 8000).",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    target_path = Path(os.path.abspath(args.path))
    if not target_path.exists():
        raise SystemExit(f"Error: Path does not exist: {target_path}")

    if args.serve:
        _serve(target_path, args.host, args.port)
        return

    if args.json:
        # Keep stdout clean for the JSON document
        with contextlib.redirect_stdout(sys.stderr):
            reports = scan_codebase(target_path, max_workers=args.workers)
        print(RankingResponse.from_reports(str(target_path), reports).model_dump_json(indent=2))
        return

    reports = scan_codebase(target_path, max_workers=args.workers)
    print("Analysis complete.\n", flush=True)
    render_ranking(Console(), reports)


if __name__ == "__main__":
    main()
