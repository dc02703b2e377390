from __future__ import annotations

import json
from pathlib import Path

from quoteflow.catalog import CATALOG_ENV_VAR, load_categories
from quoteflow.messages import CATALOG_FALLBACK


def test_builtin_catalog_sorted() -> None:
    categories, warning = load_categories()
    assert warning is None
    assert len(categories) == 14
    names = [category.name.lower() for category in categories]
    assert names == sorted(names)
    assert any(category.name == "Forekazık" for category in categories)


def test_override_with_aliases(tmp_path: Path, monkeypatch) -> None:
    path = tmp_path / "catalog.json"
    path.write_text(
        json.dumps(
            [
                {"id": "z", "name": "Zemin Etüdü", "icon_name": "IconZemin"},
                {"id": "a", "name": "Ankraj", "imageUrl": "https://example.test/a.jpg"},
            ]
        ),
        encoding="utf-8",
    )
    monkeypatch.setenv(CATALOG_ENV_VAR, str(path))
    categories, warning = load_categories()
    assert warning is None
    assert [category.id for category in categories] == ["a", "z"]
    assert categories[0].image_url == "https://example.test/a.jpg"
    assert categories[1].icon_key == "IconZemin"


def test_broken_override_falls_back(tmp_path: Path, monkeypatch) -> None:
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps({"items": []}), encoding="utf-8")
    monkeypatch.setenv(CATALOG_ENV_VAR, str(path))
    categories, warning = load_categories()
    assert warning == CATALOG_FALLBACK
    assert len(categories) == 14
