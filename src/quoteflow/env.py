"""Minimal .env loader for the quoteflow CLI."""

from __future__ import annotations

import os
from pathlib import Path


def load_dotenv(path: str | Path = ".env") -> dict[str, str]:
    """Export ``KEY=value`` pairs without overriding variables already set.

    Returns the pairs that were applied.
    """
    env_path = Path(path)
    try:
        text = env_path.read_text(encoding="utf-8")
    except OSError:
        return {}

    applied: dict[str, str] = {}
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or "=" not in stripped:
            continue
        if stripped.startswith("export "):
            stripped = stripped[len("export ") :].lstrip()
        key, value = (part.strip() for part in stripped.split("=", 1))
        if not key or key in os.environ:
            continue
        if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
            value = value[1:-1]
        elif " #" in value:
            value = value.split(" #", 1)[0].rstrip()
        if value == "":
            continue
        os.environ[key] = value
        applied[key] = value
    return applied
