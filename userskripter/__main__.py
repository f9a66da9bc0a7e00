"""Module entrypoint for ``python -m userskripter``."""

from __future__ import annotations

import sys

from userskripter.cli import main


if __name__ == "__main__":  # pragma: no cover - module execution
    sys.exit(main())
