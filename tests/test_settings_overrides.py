from __future__ import annotations

from typing import Iterable

from datastore.reading_store import build_default_store
from services.telemetry import build_default_service
from settings import get_settings


def _clear_caches(caches: Iterable) -> None:
    for cache in caches:
        cache.cache_clear()


CACHES = (get_settings, build_default_store, build_default_service)


def test_environment_overrides_apply(monkeypatch, tmp_path) -> None:
    store_path = tmp_path / "readings.json"

    monkeypatch.setenv("READINGS_STORE_PATH", str(store_path))
    monkeypatch.setenv("READINGS_WINDOW_HOURS", "6")
    monkeypatch.setenv("SERIES_MAX_POINTS", "12")
    monkeypatch.setenv("NITROGEN_ALERT_PPM", "150")
    monkeypatch.setenv("PH_MIN", "5.5")
    monkeypatch.setenv("PH_MAX", "7.5")
    _clear_caches(CACHES)

    try:
        service = build_default_service()
        assert service.store.persistence_path == store_path
        assert service.window_hours == 6
        assert service.window_label == "6 hours"
        assert service.max_points == 12
        assert service.evaluator.nitrogen_threshold == 150.0
        assert (service.evaluator.ph_min, service.evaluator.ph_max) == (5.5, 7.5)
    finally:
        _clear_caches(CACHES)


def test_invalid_values_fall_back_to_defaults(monkeypatch) -> None:
    monkeypatch.setenv("READINGS_STORE_PATH", "  ")
    monkeypatch.setenv("READINGS_WINDOW_HOURS", "-3")
    monkeypatch.setenv("SERIES_MAX_POINTS", "lots")
    monkeypatch.setenv("PH_MIN", "8")
    monkeypatch.setenv("PH_MAX", "7")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    get_settings.cache_clear()

    try:
        settings = get_settings()
        assert settings.store_path is None
        assert settings.window_hours == 24
        assert settings.series_max_points == 30
        assert (settings.ph_min, settings.ph_max) == (6.0, 7.0)
        assert settings.log_level == "DEBUG"
    finally:
        get_settings.cache_clear()
