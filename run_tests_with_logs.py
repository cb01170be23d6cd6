from __future__ import annotations

import argparse
import io
import sys
import unittest
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence

from recordsmith.logging_setup import setup_logging


def _timestamp(now: datetime | None = None) -> str:
    ts = now or datetime.now()
    return ts.strftime("%Y%m%d_%H%M%S")


def _report_path(log_dir: Path, now: datetime | None = None) -> Path:
    return log_dir / f"recordsmith_failures_{_timestamp(now)}.txt"


def _failed_test_ids(result: unittest.result.TestResult) -> list[str]:
    return [test.id() if hasattr(test, "id") else str(test) for test, _ in result.failures + result.errors]


def _build_report(result: unittest.result.TestResult, test_output: str, engine_log: str) -> str:
    lines: list[str] = []
    lines.append(f"Timestamp: {datetime.now().isoformat(timespec='seconds')}")
    lines.append(
        "Summary: "
        f"ran={result.testsRun}, failures={len(result.failures)}, "
        f"errors={len(result.errors)}, skipped={len(result.skipped)}"
    )
    failed = _failed_test_ids(result)
    if failed:
        lines.append("Failed tests:")
        lines.extend(f"  - {name}" for name in failed)
    lines.append("Fix: inspect the traces and engine log below, fix the failing tests, then rerun this script.")
    lines.append("")
    lines.append("=== unittest output ===")
    lines.append(test_output.rstrip())
    if engine_log.strip():
        lines.append("")
        lines.append("=== engine log ===")
        lines.append(engine_log.rstrip())
    lines.append("")
    return "\n".join(lines)


def _write_report(log_dir: Path, content: str, now: datetime | None = None) -> Path:
    log_dir.mkdir(parents=True, exist_ok=True)
    path = _report_path(log_dir, now)
    path.write_text(content, encoding="utf-8")
    return path


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the recordsmith test suite and keep a log of failures.")
    parser.add_argument("--start-dir", default="tests")
    parser.add_argument("--pattern", default="test_*.py")
    parser.add_argument("--log-dir", default=str(Path("tests") / "testlogs"))
    parser.add_argument("--log-level", default="WARNING", help="level for engine log lines captured in the report")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)

    engine_log = io.StringIO()
    setup_logging(args.log_level, stream=engine_log)

    suite = unittest.TestLoader().discover(start_dir=args.start_dir, pattern=args.pattern)
    output = io.StringIO()
    result = unittest.TextTestRunner(stream=output, verbosity=2).run(suite)

    test_output = output.getvalue()
    sys.stdout.write(test_output)

    if result.wasSuccessful():
        print("All tests passed. No failure log written.")
        return 0

    report = _build_report(result, test_output, engine_log.getvalue())
    log_path = _write_report(Path(args.log_dir), report)
    print(f"Test failures detected. Log written to: {log_path}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
