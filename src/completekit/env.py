"""
Credential file support: copies ``KEY=value`` lines from a ``.env`` file into
the process environment so ``<KIND>_API_KEY`` fallbacks can find them.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable


def load_env_if_present(candidate_paths: Iterable[Path]) -> None:
    """
    Read the first candidate that is a regular file.

    Blank lines, ``#`` comments and lines without ``=`` are skipped. Values
    lose one layer of surrounding quotes. Variables already set in the
    environment win over the file.
    """
    for env_path in candidate_paths:
        if not env_path.is_file():
            continue
        try:
            lines = env_path.read_text().splitlines()
        except OSError:
            # try the next candidate
            continue
        for line in lines:
            entry = line.strip()
            if not entry or entry.startswith("#") or "=" not in entry:
                continue
            key, value = (part.strip() for part in entry.split("=", 1))
            value = value.strip('"').strip("'")
            if key:
                os.environ.setdefault(key, value)
        return


def load_default_env() -> None:
    """Look for ``.env`` in the working directory, then at the project root."""
    load_env_if_present(
        [
            Path.cwd() / ".env",
            Path(__file__).resolve().parents[2] / ".env",
        ]
    )


__all__ = ["load_default_env", "load_env_if_present"]
