#!/usr/bin/env python3
"""
Run negative tests: every .js in examples/test_syntax_err/ must fail (lex/parse/runtime).
"""
import argparse
import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent
BASE = ROOT / "examples" / "test_syntax_err"


def run_interpreter(test_file: Path) -> bool:
    proc = subprocess.run(
        [sys.executable, "-m", "gojo", str(test_file.resolve())],
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
        cwd=ROOT,
        timeout=30,
    )
    if proc.returncode == 1 and proc.stderr.strip():
        print(f"[PASS] {test_file.name} (expected failure)")
        print(f"  stderr: {proc.stderr.strip()}")
        return True
    print(f"[FAIL] {test_file.name} (exit {proc.returncode})")
    if proc.stdout.strip():
        print(f"  stdout: {proc.stdout.strip()}")
    if proc.stderr.strip():
        print(f"  stderr: {proc.stderr.strip()}")
    return False


def main():
    parser = argparse.ArgumentParser(description="Run negative .js tests that should fail.")
    parser.add_argument("--filter", help="Substring filter for test filenames", default="")
    args = parser.parse_args()

    tests = sorted(BASE.glob("*.js"))
    if args.filter:
        tests = [t for t in tests if args.filter in t.name]
    if not tests:
        print("No tests found.")
        return 0

    all_pass = True
    for t in tests:
        ok = run_interpreter(t)
        all_pass = all_pass and ok

    return 0 if all_pass else 1


if __name__ == "__main__":
    sys.exit(main())
