from pathlib import Path

from shared.config import CATALOG_DIR, _env_first


def test_env_first_prefers_earliest_non_empty(monkeypatch) -> None:
    monkeypatch.setenv("WARHOST_TEST_A", "  ")
    monkeypatch.setenv("WARHOST_TEST_B", "second")
    monkeypatch.setenv("WARHOST_TEST_C", "third")
    assert _env_first("WARHOST_TEST_A", "WARHOST_TEST_B", "WARHOST_TEST_C") == "second"


def test_env_first_uses_default_when_unset(monkeypatch) -> None:
    monkeypatch.delenv("WARHOST_TEST_MISSING", raising=False)
    assert _env_first("WARHOST_TEST_MISSING", default="fallback") == "fallback"


def test_catalog_dir_points_at_bundled_yaml() -> None:
    catalog = Path(CATALOG_DIR)
    assert (catalog / "factions.yaml").exists()
    assert (catalog / "planets.yaml").exists()
    assert (catalog / "tones.yaml").exists()
