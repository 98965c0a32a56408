# run_all_tests.py

import sys
import os
import re
import glob
from pathlib import Path
from typing import Dict, Optional, Tuple

from evaluation import EvalContext, Session
from runtime.display import format_compact

_REPO_ROOT = Path(__file__).resolve().parent


def test_sort_key(path: str) -> str:
    """Sort test files alphabetically by full path."""
    return path


TEST_FILES = sorted(glob.glob(str(_REPO_ROOT / "tests/**/*.cv"), recursive=True), key=test_sort_key)

EXPECT_RE = re.compile(r"%\s*EXPECT:\s*(.+)$")
TOLERANCE_RE = re.compile(r"%\s*TOLERANCE:\s*(\S+)\s*$")
EXPECT_ERRORS_RE = re.compile(r"errors\s*=\s*(\d+)\s*$", re.IGNORECASE)
EXPECT_BINDING_RE = re.compile(r"([A-Za-z_]\w*)\s*=\s*(.+)$")

# Expected value of a name that must not be bound
UNDEFINED = "undefined"


def normalize_value_str(s: str) -> str:
    return re.sub(r"\s+", "", s.strip())


def parse_expectations(src: str) -> Tuple[Dict[str, str], Optional[int], float]:
    """Collect '% EXPECT:' and '% TOLERANCE:' annotations from a script.

    Returns:
        (expected values by name, expected error count or None, zero tolerance)
    """
    expected_values: Dict[str, str] = {}
    expected_error_count: Optional[int] = None
    tolerance = 0.0

    for line in src.splitlines():
        stripped = line.strip()

        m_tol = TOLERANCE_RE.match(stripped)
        if m_tol:
            tolerance = float(m_tol.group(1))
            continue

        m = EXPECT_RE.match(stripped)
        if not m:
            continue

        payload = m.group(1).strip()

        m_err = EXPECT_ERRORS_RE.match(payload)
        if m_err:
            expected_error_count = int(m_err.group(1))
            continue

        m_bind = EXPECT_BINDING_RE.match(payload)
        if m_bind:
            expected_values[m_bind.group(1)] = normalize_value_str(m_bind.group(2))

    return expected_values, expected_error_count, tolerance


def run_test(path: str) -> bool:
    """Run a script test file and check its expectations.

    Args:
        path: Path to test file

    Returns:
        True if every expectation holds
    """
    print(f"===== Evaluation of {path}")
    if not os.path.exists(path):
        print("ERROR: file not found\n")
        return False

    with open(path, "r", errors='replace') as f:
        src = f.read()
    expected_values, expected_error_count, tolerance = parse_expectations(src)

    session = Session(EvalContext(zero_tolerance=tolerance, echo=False))
    result = session.run_source(src)

    if not result.diagnostics:
        print("No errors.")
    else:
        print("Errors:")
        for d in result.diagnostics:
            print("-", d)

    print("Final environment:")
    print("   ", {name: format_compact(session.env.get(name)) for name in session.env.names()})

    passed = True

    if expected_error_count is not None and len(result.diagnostics) != expected_error_count:
        print(f"ASSERT FAIL: expected errors = {expected_error_count}, got {len(result.diagnostics)}")
        passed = False

    for var, expected in expected_values.items():
        value = session.env.lookup(var)
        actual = UNDEFINED if value is None else normalize_value_str(format_compact(value))
        if actual != expected:
            print(f"ASSERT FAIL: expected {var} = {expected}, got {actual}")
            passed = False

    print("ASSERTIONS:", "PASS" if passed else "FAIL")
    print()
    return passed


def _run_structural_tests() -> tuple[int, int]:
    """Run structural Python tests and return (total, passed) counts."""
    import importlib.util
    structural_dir = _REPO_ROOT / "tests" / "structural"
    test_files = sorted(structural_dir.glob("test_*.py"))
    total = 0
    ok = 0
    for tf in test_files:
        spec = importlib.util.spec_from_file_location(tf.stem, tf)
        mod = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(mod)
        test_fns = [
            (name, obj)
            for name, obj in vars(mod).items()
            if name.startswith("test_") and callable(obj)
        ]
        for name, func in test_fns:
            total += 1
            try:
                func()
                print(f"===== Structural: {tf.stem}.{name}: PASS")
                ok += 1
            except AssertionError as e:
                print(f"===== Structural: {tf.stem}.{name}: FAIL: {e}")
            except Exception as e:
                print(f"===== Structural: {tf.stem}.{name}: ERROR: {type(e).__name__}: {e}")
    return total, ok


def main(return_code: bool = False) -> int:
    """Run all tests.

    Args:
        return_code: If True, return exit code instead of exiting

    Returns:
        Exit code (0 for all tests passed, 1 otherwise)
    """
    total = 0
    ok = 0

    for path in TEST_FILES:
        total += 1
        if run_test(path):
            ok += 1

    # Run structural Python tests alongside .cv tests
    structural_total, structural_ok = _run_structural_tests()
    total += structural_total
    ok += structural_ok

    print(f"===== Summary: {ok}/{total} tests passed =====")

    rc = 0 if ok == total else 1
    if return_code:
        return rc
    sys.exit(rc)


if __name__ == "__main__":
    sys.exit(main(return_code=True))
