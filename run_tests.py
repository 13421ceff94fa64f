#!/usr/bin/env python3
"""
Simple test runner for the shortlink project.
Run this to execute all tests.
"""

import subprocess
import sys
import os


def run_tests(extra_args=None):
    """Run the test suite, passing any extra arguments through to pytest"""
    print("🧪 Running Shortlink Tests")
    print("=" * 40)

    # Change to project directory
    os.chdir(os.path.dirname(os.path.abspath(__file__)))

    try:
        subprocess.run([
            sys.executable, "-m", "pytest",
            "tests/",
            "-v",
            "--tb=short",
            *(extra_args or [])
        ], check=True)

        print("\n✅ All tests passed!")
        return 0

    except subprocess.CalledProcessError as e:
        print(f"\n❌ Tests failed with exit code {e.returncode}")
        return e.returncode
    except FileNotFoundError:
        print("❌ pytest not found. Install with: pip install -e '.[test]'")
        return 1


if __name__ == "__main__":
    sys.exit(run_tests(sys.argv[1:]))
