from __future__ import annotations

"""
Unit tests for Internationalization (i18n) resolution.

Ensures the bundled locale covers every key the CLI renders and that
dot-notation resolution works as expected.
"""

import json
from pathlib import Path
from typing import Any, Dict, Set

import pytest

from dircomp.utils.i18n import I18n, i18n


def _get_flat_keys(d: Dict[str, Any], prefix: str = "") -> Set[str]:
    """Helper to flatten nested dictionary keys into dot-notation sets."""
    keys = set()
    for k, v in d.items():
        new_key = f"{prefix}.{k}" if prefix else k
        if isinstance(v, dict):
            keys.update(_get_flat_keys(v, new_key))
        else:
            keys.add(new_key)
    return keys


def test_default_locale_is_loaded() -> None:
    assert i18n.is_loaded
    assert "torrent" in i18n.t("app.description").lower()


@pytest.mark.parametrize("kind", ["safety", "decode", "extract", "read", "precondition"])
def test_every_error_kind_has_a_message(kind: str) -> None:
    msg = i18n.t(f"cli.errors.{kind}", error="details")

    assert msg != f"cli.errors.{kind}"
    assert "details" in msg


def test_status_keys_present() -> None:
    with open(Path(i18n._locales_path) / "en.json", "r", encoding="utf-8") as f:
        keys = _get_flat_keys(json.load(f))

    for key in ["clean", "synced", "dry_run", "failures", "unlocked", "unlock_skipped"]:
        assert f"cli.status.{key}" in keys


def test_i18n_resolution_logic(tmp_path: Path) -> None:
    """Verify dot-notation resolution, interpolation and fallbacks."""
    dummy_content = {
        "test": {
            "hello": "Hello {name}!",
            "simple": "Simple Text",
        }
    }
    (tmp_path / "test_locale.json").write_text(json.dumps(dummy_content), encoding="utf-8")

    service = I18n("en")
    service._locales_path = str(tmp_path)
    service.load_locale("test_locale")

    assert service.t("test.simple") == "Simple Text"
    assert service.t("test.hello", name="World") == "Hello World!"
    assert service.t("test.hello") == "Hello {name}!"
    assert service.t("missing.key") == "missing.key"
    assert service.t("missing.key", default="got {x}", x=1) == "got 1"
    assert service.t("test") == "test"


def test_missing_locale_file(tmp_path: Path) -> None:
    service = I18n("en")
    service._locales_path = str(tmp_path)
    service.load_locale("xx")

    assert service.is_loaded is False
    assert service.t("app.description") == "app.description"


def test_corrupted_locale_file(tmp_path: Path) -> None:
    (tmp_path / "bad.json").write_text("{not json", encoding="utf-8")
    service = I18n("en")
    service._locales_path = str(tmp_path)
    service.load_locale("bad")

    assert service.is_loaded is False
