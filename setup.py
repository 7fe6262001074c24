"""
Build script for justssml with optional mypyc compilation.

Usage:
    # Pure Python build (default)
    python -m build

    # Compiled with mypyc
    JUSTSSML_USE_MYPYC=1 pip install .
"""

import os
import sys
from pathlib import Path

from setuptools import setup

USE_MYPYC = os.environ.get("JUSTSSML_USE_MYPYC", "0") == "1"

# Modules on the per-character and per-token paths.
# document.py and attributes.py stay interpreted: slotted frozen dataclasses
# with defaults are not something mypyc compiles cleanly.
MYPYC_MODULES = [
    "src/justssml/scanner.py",
    "src/justssml/treebuilder.py",
    "src/justssml/decoders.py",
    "src/justssml/entities.py",
]


def build_with_mypyc() -> list:
    """Build extension modules using mypyc."""
    try:
        from mypyc.build import mypycify
    except ImportError:
        print(
            "ERROR: mypyc is not installed. Install with: pip install mypy",
            file=sys.stderr,
        )
        print("Or install with mypyc support: pip install justssml[mypyc]", file=sys.stderr)
        sys.exit(1)

    for module_path in MYPYC_MODULES:
        if not Path(module_path).exists():
            print(f"ERROR: Module not found: {module_path}", file=sys.stderr)
            sys.exit(1)

    print("=" * 70)
    print("Building justssml with mypyc compilation")
    print("=" * 70)
    print(f"Compiling {len(MYPYC_MODULES)} modules:")
    for module in MYPYC_MODULES:
        print(f"  - {module}")
    print("=" * 70)

    opt_level = os.environ.get("MYPYC_OPT_LEVEL", "3")
    debug_level = os.environ.get("MYPYC_DEBUG_LEVEL", "0")

    return mypycify(
        MYPYC_MODULES,
        opt_level=opt_level,
        debug_level=debug_level,
        verbose=True,
        separate=False,
        multi_file=False,
    )


if __name__ == "__main__":
    ext_modules = []

    if USE_MYPYC:
        ext_modules = build_with_mypyc()
    else:
        print("Building justssml in pure Python mode (no mypyc compilation)")
        print("To enable mypyc: JUSTSSML_USE_MYPYC=1 pip install .")

    setup(
        ext_modules=ext_modules,
    )
