from __future__ import annotations

import importlib.util
import sys
from pathlib import Path

CHECKS = (
    "test_core_never_imports_orchestration",
    "test_codecs_do_not_import_each_other",
)


def main() -> int:
    repo_root = Path(__file__).resolve().parents[1]
    test_path = repo_root / "tests" / "test_arch_boundaries.py"
    if not test_path.is_file():
        print("ERROR: tests/test_arch_boundaries.py not found.", file=sys.stderr)
        return 3

    try:
        # registered in sys.modules: dataclasses resolves annotations through it
        spec = importlib.util.spec_from_file_location("arch_boundaries", test_path)
        mod = importlib.util.module_from_spec(spec)
        sys.modules[spec.name] = mod
        spec.loader.exec_module(mod)

        for name in CHECKS:
            fn = getattr(mod, name, None)
            if not callable(fn):
                print(f"ERROR: {name} not found.", file=sys.stderr)
                return 3
            fn()
        print("OK: architecture boundaries respected.")
        return 0
    except AssertionError as e:
        print(str(e), file=sys.stderr)
        return 2
    except Exception as e:
        print(f"ERROR: unexpected failure: {e}", file=sys.stderr)
        return 3


if __name__ == "__main__":
    raise SystemExit(main())
