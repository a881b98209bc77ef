from __future__ import annotations

from pathlib import Path

import pytest

from thesisync.config import (
    ConfigurationError,
    MissingConfigurationError,
    SyncConfig,
    env_flag,
    get_geocoding_config,
    get_pure_config,
    get_storage_config,
    get_sync_config,
    require_env_var,
    require_env_vars,
)
from thesisync.config.geocoding import DEFAULT_GEOCODER_URL
from thesisync.config.pure import DEFAULT_PURE_BASE_URL


def test_require_env_vars_returns_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", " value ")

    result = require_env_vars(["EXAMPLE_VAR"])

    assert result["EXAMPLE_VAR"] == "value"


def test_require_env_vars_raises_when_any_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MISSING_VAR", raising=False)
    monkeypatch.setenv("PRESENT_VAR", "1")

    with pytest.raises(MissingConfigurationError) as exc:
        require_env_vars(["PRESENT_VAR", "MISSING_VAR"])

    assert "MISSING_VAR" in str(exc.value)
    assert "PRESENT_VAR" not in str(exc.value)


def test_require_env_var_handles_blank_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "   ")

    with pytest.raises(MissingConfigurationError):
        require_env_var("EXAMPLE_VAR")


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("1", True), ("TRUE", True), ("yes", True), ("0", False), ("off", False)],
)
def test_env_flag_parses_booleans(
    monkeypatch: pytest.MonkeyPatch, raw: str, expected: bool
) -> None:
    monkeypatch.setenv("FLAG_VAR", raw)

    assert env_flag("FLAG_VAR", default=not expected) is expected


def test_env_flag_defaults_and_rejects_garbage(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("FLAG_VAR", raising=False)
    assert env_flag("FLAG_VAR", default=True) is True

    monkeypatch.setenv("FLAG_VAR", "maybe")
    with pytest.raises(ConfigurationError, match="FLAG_VAR"):
        env_flag("FLAG_VAR", default=True)


def test_get_pure_config_requires_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("PURE_API_KEY", raising=False)

    with pytest.raises(MissingConfigurationError, match="PURE_API_KEY"):
        get_pure_config()


def test_get_pure_config_builds_authenticated_resilience(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PURE_API_KEY", "secret")
    monkeypatch.delenv("PURE_API_BASE_URL", raising=False)
    monkeypatch.setenv("PORTAL_BASE_URL", "https://portal.test/")

    config = get_pure_config()

    assert config.api_key == "secret"
    assert config.base_url == f"{DEFAULT_PURE_BASE_URL}/"
    assert config.resilience.default_headers is not None
    assert config.resilience.default_headers["api-key"] == "secret"
    assert config.project_url("abc") == "https://portal.test/en/publications/abc"
    assert config.person_url("carla") == "https://portal.test/da/persons/carla"


def test_get_geocoding_config_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("GEOCODER_URL", "GEOCODER_USER_AGENT", "GEOCODER_CACHE_PATH", "SYNC_GEOCODING"):
        monkeypatch.delenv(name, raising=False)

    config = get_geocoding_config()

    assert config.enabled is True
    assert config.url == DEFAULT_GEOCODER_URL
    assert config.resilience.ratelimit is not None
    assert config.resilience.ratelimit.max_calls == 1
    assert config.resilience.cache is not None
    assert config.resilience.cache.backend == "memory"


def test_get_geocoding_config_can_be_disabled(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SYNC_GEOCODING", "false")
    monkeypatch.setenv("GEOCODER_CACHE_PATH", "/tmp/geocode.sqlite")

    config = get_geocoding_config()

    assert config.enabled is False
    assert config.resilience.cache is not None
    assert config.resilience.cache.backend == "sqlite"


def test_get_storage_config_prefers_explicit_dir(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SYNC_OUTPUT_DIR", "/srv/from-env")

    assert get_storage_config(output_dir="public/data").output_dir == Path("public/data")
    assert get_storage_config().output_dir == Path("/srv/from-env")


def test_get_storage_config_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SYNC_OUTPUT_DIR", raising=False)

    config = get_storage_config()

    assert config.output_dir == Path("data")
    assert config.resolve_output_dir() == Path.cwd().resolve() / "data"


def test_get_sync_config_ignores_unset_overrides() -> None:
    config = get_sync_config(page_size=None, enrich_concurrency=4, max_records=None)

    assert config == SyncConfig(enrich_concurrency=4)


@pytest.mark.parametrize(
    "overrides",
    [
        {"page_size": 0},
        {"enrich_concurrency": 0},
        {"page_delay_seconds": -1.0},
        {"max_records": 0},
    ],
)
def test_sync_config_rejects_invalid_values(overrides: dict[str, object]) -> None:
    with pytest.raises(ConfigurationError):
        get_sync_config(**overrides)
