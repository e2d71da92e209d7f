#!/usr/bin/env python3
"""Integer-math linting script for the stable swap engine.

Curve and fee math must stay in unsigned integers with checked
intermediates: a float or an unchecked product in a reserve computation
silently changes the amounts a pool pays out. This script scans the
package for patterns that break that rule and is meant to run in CI.

Usage:
    python scripts/check_safe_math.py [--verbose] [--include-tests]

Exit codes:
    0 - No blocking issues found
    1 - CRITICAL or HIGH issues found (with details printed)
"""

import argparse
import re
import sys
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path


@dataclass
class Issue:
    """A detected unsafe math pattern."""

    file: Path
    line_num: int
    line: str
    pattern: str
    severity: str  # CRITICAL, HIGH, MEDIUM
    message: str
    suggestion: str | None = None


# Directories to scan
SCAN_DIRS = ["stableswap"]

# The HTTP and model layers only move decimal strings around
SKIP_PATHS = ["__pycache__", "api/", "models/"]

# Words that mark a line as handling pool amounts
AMOUNT_KEYWORDS = ["amount", "reserve", "fee", "balance", "supply", "mint"]

TRUE_DIVISION = re.compile(r"(\w+|\))\s*/(?!/)\s*(\w+|\()")
FLOAT_LITERAL = re.compile(r"(?<![\w.])\d+\.\d+")
PLAIN_PRODUCT = re.compile(r"(\w+)\s*\*(?!\*)\s*(\w+)")
TOLERANCE = re.compile(r"abs\s*\([^)]+\)\s*[<>]=?\s*([\d_]+)")


def should_skip_file(path: Path) -> bool:
    return any(skip in path.as_posix() for skip in SKIP_PATHS)


class DocstringTracker:
    """Strip docstrings, string literals and comments line by line."""

    def __init__(self) -> None:
        self.delimiter: str | None = None

    def process_line(self, line: str) -> tuple[str, bool]:
        """Return (code_only_line, entirely_in_docstring)."""
        started_inside = self.delimiter is not None
        result = []
        i = 0
        while i < len(line):
            triple = line[i : i + 3]
            if triple in ('"""', "'''") and self.delimiter in (None, triple):
                self.delimiter = None if self.delimiter else triple
                result.append("   ")
                i += 3
                continue
            if self.delimiter is not None:
                result.append(" ")
                i += 1
                continue

            char = line[i]
            if char == "#":
                break
            if char in ('"', "'"):
                end = line.find(char, i + 1)
                end = len(line) - 1 if end == -1 else end
                result.append(" " * (end - i + 1))
                i = end + 1
                continue
            result.append(char)
            i += 1

        return "".join(result), started_inside and self.delimiter is not None


def code_lines(lines: list[str]) -> Iterator[tuple[int, str, str]]:
    """Yield (line_num, original, code_only) for lines that hold code."""
    tracker = DocstringTracker()
    for i, original in enumerate(lines, 1):
        code, in_docstring = tracker.process_line(original)
        if in_docstring or not code.strip():
            continue
        if code.lstrip().startswith(("from ", "import ")):
            continue
        yield i, original.rstrip(), code


def check_float_math(path: Path, lines: list[str]) -> Iterator[Issue]:
    """True division, Decimal and floats have no place in pool math."""
    for i, original, code in code_lines(lines):
        if TRUE_DIVISION.search(code):
            yield Issue(
                file=path,
                line_num=i,
                line=original,
                pattern="true division",
                severity="CRITICAL",
                message="'/' produces a float",
                suggestion="Use // on SafeInt, or mul_div for scaled amounts",
            )
        if "Decimal" in code:
            yield Issue(
                file=path,
                line_num=i,
                line=original,
                pattern="Decimal value",
                severity="CRITICAL",
                message="Decimal rounding differs from floor on integers",
                suggestion="Use SafeInt floor division",
            )
        if "float(" in code or FLOAT_LITERAL.search(code):
            yield Issue(
                file=path,
                line_num=i,
                line=original,
                pattern="float value",
                severity="CRITICAL",
                message="Float in integer math",
                suggestion="Keep amounts as int and ratios as numerator/denominator",
            )


def check_unchecked_products(path: Path, lines: list[str]) -> Iterator[Issue]:
    """Products of pool amounts must go through SafeInt or mul_div."""
    for i, original, code in code_lines(lines):
        match = PLAIN_PRODUCT.search(code)
        if not match or "S(" in code or "mul_div" in code:
            continue
        operands = f"{match.group(1)} {match.group(2)}".lower()
        if any(kw in operands for kw in AMOUNT_KEYWORDS):
            yield Issue(
                file=path,
                line_num=i,
                line=original,
                pattern="unchecked product",
                severity="HIGH",
                message="Multiplication of amounts without a width check",
                suggestion="Wrap with S(...) and narrow with to_u64()",
            )


def scan_file(path: Path) -> list[Issue]:
    """Scan a single file for unsafe math patterns."""
    if should_skip_file(path):
        return []
    lines = path.read_text().split("\n")
    issues = []
    issues.extend(check_float_math(path, lines))
    issues.extend(check_unchecked_products(path, lines))
    return issues


def scan_tests(base_dir: Path) -> list[Issue]:
    """Flag test tolerances wider than one unit that carry no comment."""
    issues = []
    test_dir = base_dir / "tests"
    if not test_dir.exists():
        return issues

    for py_file in test_dir.rglob("*.py"):
        lines = py_file.read_text().split("\n")
        for i, original, code in code_lines(lines):
            match = TOLERANCE.search(code)
            if not match or match.group(1).replace("_", "") in ("0", "1"):
                continue
            documented = "#" in original or (i > 1 and lines[i - 2].strip().startswith("#"))
            if not documented:
                issues.append(
                    Issue(
                        file=py_file,
                        line_num=i,
                        line=original,
                        pattern="undocumented test tolerance",
                        severity="MEDIUM",
                        message="Test uses a tolerance without explaining it",
                        suggestion="Add a comment on why the tolerance is acceptable",
                    )
                )
    return issues


def print_report(issues: list[Issue], verbose: bool) -> None:
    """Print the audit report."""
    if not issues:
        print("✓ No unsafe math patterns found!")
        return

    by_severity: dict[str, list[Issue]] = {"CRITICAL": [], "HIGH": [], "MEDIUM": []}
    for issue in issues:
        by_severity[issue.severity].append(issue)

    print(f"\n{'=' * 70}")
    print("SAFE MATH AUDIT RESULTS")
    print(f"{'=' * 70}")
    for severity, items in by_severity.items():
        if items:
            print(f"  {severity:10} {len(items):4}")
    print(f"  {'TOTAL':10} {len(issues):4}")
    print(f"{'=' * 70}\n")

    for severity, items in by_severity.items():
        if not items:
            continue
        print(f"\n[{severity}] {len(items)} issue(s):\n")
        for issue in items:
            rel_path = (
                issue.file.relative_to(Path.cwd())
                if issue.file.is_relative_to(Path.cwd())
                else issue.file
            )
            print(f"  {rel_path}:{issue.line_num}")
            print(f"    {issue.pattern}: {issue.message}")
            if verbose:
                print(f"    > {issue.line.strip()[:70]}")
                if issue.suggestion:
                    print(f"    Suggestion: {issue.suggestion}")
            print()


def main() -> None:
    parser = argparse.ArgumentParser(description="Integer-math linter for the stable swap engine")
    parser.add_argument("--verbose", "-v", action="store_true")
    parser.add_argument("--include-tests", action="store_true")
    args = parser.parse_args()

    base_dir = Path(__file__).parent.parent
    issues = []
    for scan_dir in SCAN_DIRS:
        dir_path = base_dir / scan_dir
        if dir_path.exists():
            for py_file in sorted(dir_path.rglob("*.py")):
                issues.extend(scan_file(py_file))

    if args.include_tests:
        issues.extend(scan_tests(base_dir))

    print_report(issues, args.verbose)

    if any(i.severity in ("CRITICAL", "HIGH") for i in issues):
        print("❌ Blocking issues found - must fix before commit")
        sys.exit(1)
    print("✓ No blocking issues")
    sys.exit(0)


if __name__ == "__main__":
    main()
