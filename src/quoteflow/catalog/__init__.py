"""Catalog loader for service categories."""

from __future__ import annotations

from dataclasses import dataclass
import json
import logging
import os
from importlib import resources
from pathlib import Path
from typing import Any, Sequence

from quoteflow.messages import CATALOG_FALLBACK

logger = logging.getLogger(__name__)

CATALOG_ENV_VAR = "QUOTEFLOW_CATEGORY_CATALOG_PATH"


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    description: str
    icon_key: str
    image_url: str | None


def load_categories() -> tuple[list[Category], str | None]:
    """Return the categories and a warning when the override was unusable."""
    override = os.getenv(CATALOG_ENV_VAR)
    if override:
        try:
            return _load_from_path(Path(override)), None
        except Exception:  # noqa: BLE001
            logger.warning("Category catalog override %s failed", override, exc_info=True)
            return _load_builtin(), CATALOG_FALLBACK
    return _load_builtin(), None


def find_category(categories: Sequence[Category], name: str) -> Category | None:
    """Match a category by name or id, ignoring case."""
    needle = name.strip().lower()
    for category in categories:
        if category.name.lower() == needle or category.id.lower() == needle:
            return category
    return None


def resolve_category(categories: Sequence[Category], hint: str | None) -> Category:
    """Pick the category a draft hints at, falling back to the first one."""
    if not categories:
        raise ValueError("Catalog is empty.")
    if hint:
        match = find_category(categories, hint)
        if match is not None:
            return match
    return categories[0]


def _load_from_path(path: Path) -> list[Category]:
    data = json.loads(path.read_text(encoding="utf-8"))
    return _validate_catalog(data)


def _load_builtin() -> list[Category]:
    data = resources.files(__name__).joinpath("categories.json").read_text(encoding="utf-8")
    return _validate_catalog(json.loads(data))


def _validate_catalog(data: Any) -> list[Category]:
    if not isinstance(data, list):
        raise ValueError("Catalog must be a list of items.")
    items: list[Category] = []
    for idx, raw in enumerate(data):
        if not isinstance(raw, dict):
            raise ValueError(f"Catalog item {idx} must be an object.")
        key = raw.get("id")
        if not isinstance(key, str) or not key.strip():
            raise ValueError(f"Catalog item {idx} missing 'id'.")
        name = raw.get("name")
        if not isinstance(name, str) or not name.strip():
            name = key
        description = raw.get("description")
        if not isinstance(description, str):
            description = ""
        icon_key = raw.get("icon_key", raw.get("icon_name"))
        if not isinstance(icon_key, str):
            icon_key = ""
        image_url = raw.get("image_url", raw.get("imageUrl"))
        items.append(
            Category(
                id=key.strip(),
                name=name.strip(),
                description=description.strip(),
                icon_key=icon_key.strip(),
                image_url=image_url if isinstance(image_url, str) and image_url else None,
            )
        )
    if not items:
        raise ValueError("Catalog is empty.")
    items.sort(key=lambda item: item.name.lower())
    return items
