"""Module entrypoint.

Allows:
    python -m cc_collect_data
"""

from __future__ import annotations

from cc_collect_data.cli import main

if __name__ == "__main__":
    main()
