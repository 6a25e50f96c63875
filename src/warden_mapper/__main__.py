"""Module entrypoint.

Allows:
    python -m warden_mapper
"""

from __future__ import annotations

from warden_mapper.cli import main

if __name__ == "__main__":
    main()
