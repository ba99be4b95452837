"""
PATH: manage.py

Management entrypoint for the ledger backend.

Defaults to backend.settings.dev when DJANGO_SETTINGS_MODULE is unset or
points at the settings package itself. Production sets
DJANGO_SETTINGS_MODULE=backend.settings.prod explicitly.
"""

from __future__ import annotations

import os
import sys

DEFAULT_SETTINGS = "backend.settings.dev"


def main() -> None:
    current = (os.environ.get("DJANGO_SETTINGS_MODULE") or "").strip()
    if current in ("", "backend.settings"):
        os.environ["DJANGO_SETTINGS_MODULE"] = DEFAULT_SETTINGS

    from django.core.management import execute_from_command_line

    execute_from_command_line(sys.argv)


if __name__ == "__main__":
    main()
