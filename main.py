"""Development entry point (without an install).

Why it exists:
- `python -m main toggle ...` from a checkout runs the same CLI as the
  installed `codacy-security-toggler` script. `src/` goes on `sys.path`
  first because the packages use a src layout.
"""

from __future__ import annotations

import sys
from pathlib import Path

SRC_DIR = Path(__file__).resolve().parent / "src"


def main() -> None:
    # Rich output includes non-cp1252 glyphs; Windows consoles default to it.
    if sys.platform == "win32":
        sys.stdout.reconfigure(encoding="utf-8")
        sys.stderr.reconfigure(encoding="utf-8")

    if str(SRC_DIR) not in sys.path:
        sys.path.insert(0, str(SRC_DIR))

    from cli.main import run  # noqa: PLC0415

    run()


if __name__ == "__main__":
    main()
