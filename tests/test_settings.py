"""Tests for tray harness configuration and settings.

Covers default construction, serialisation round-trip, immutability,
and forward-compatible dict loading.
"""

from __future__ import annotations

import json
from dataclasses import fields as dc_fields
from dataclasses import replace

import pytest

from tray_harness.config.settings import Settings, get_default_settings


class TestGetDefaultSettings:
    """Tests for the get_default_settings factory function."""

    def test_returns_settings_instance(self) -> None:
        assert isinstance(get_default_settings(), Settings)

    def test_wait_timeout_default(self) -> None:
        """Default wait_timeout_ms is 3000."""
        assert get_default_settings().wait_timeout_ms == 3000

    def test_settle_delay_default(self) -> None:
        """Default settle_delay_ms is 2000."""
        assert get_default_settings().settle_delay_ms == 2000

    def test_away_position_default(self) -> None:
        assert get_default_settings().away_position == (100, 0)

    def test_sample_command_default(self) -> None:
        assert get_default_settings().sample_command == "Sample Command"

    def test_icon_tooltip_default(self) -> None:
        assert get_default_settings().icon_tooltip == "Sample Icon"

    def test_locate_threshold_default(self) -> None:
        assert get_default_settings().locate_threshold == 0.8

    def test_native_scale_tried_first(self) -> None:
        assert get_default_settings().locate_scales[0] == 1.0

    def test_overrides_default_to_empty(self) -> None:
        """Arity and platform are detected unless overridden."""
        s = get_default_settings()
        assert s.activation_arity == ""
        assert s.platform_name == ""


class TestSettingsToDict:
    """Tests for Settings.to_dict serialisation."""

    def test_contains_all_fields(self) -> None:
        d = get_default_settings().to_dict()
        assert set(d.keys()) == {f.name for f in dc_fields(Settings)}

    def test_values_match_attributes(self) -> None:
        s = get_default_settings()
        d = s.to_dict()
        assert d["wait_timeout_ms"] == s.wait_timeout_ms
        assert d["sample_command"] == s.sample_command
        assert d["away_position"] == s.away_position


class TestSettingsFromDict:
    """Tests for Settings.from_dict deserialisation."""

    def test_round_trip(self) -> None:
        original = get_default_settings()
        assert Settings.from_dict(original.to_dict()) == original

    def test_json_round_trip_restores_tuples(self) -> None:
        """Lists produced by JSON come back as tuples."""
        custom = Settings(away_position=(5, 7), locate_scales=(1.0, 2.0))
        rebuilt = Settings.from_dict(json.loads(json.dumps(custom.to_dict())))
        assert rebuilt.away_position == (5, 7)
        assert rebuilt.locate_scales == (1.0, 2.0)
        assert rebuilt == custom

    def test_partial_dict_fills_defaults(self) -> None:
        s = Settings.from_dict({"wait_timeout_ms": 500})
        assert s.wait_timeout_ms == 500
        assert s.idle_timeout_ms == 5000  # default

    def test_ignores_unknown_keys(self) -> None:
        s = Settings.from_dict({"wait_timeout_ms": 10, "bogus_key": True})
        assert s.wait_timeout_ms == 10
        assert not hasattr(s, "bogus_key")


class TestSettingsFrozen:
    """Tests for the immutability guarantee of Settings."""

    def test_cannot_set_attribute(self) -> None:
        s = get_default_settings()
        with pytest.raises(AttributeError):
            s.wait_timeout_ms = 1  # type: ignore[misc]

    def test_replace_returns_new_instance(self) -> None:
        s = get_default_settings()
        changed = replace(s, activation_arity="single")
        assert changed.activation_arity == "single"
        assert s.activation_arity == ""

    def test_hashable(self) -> None:
        assert hash(get_default_settings()) == hash(get_default_settings())
