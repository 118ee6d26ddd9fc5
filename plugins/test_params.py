#!/usr/bin/env python3
"""
Tests for Parameters and the preset table.
"""

import math

import pytest

from reaction_diffusion.errors import InvalidConfigurationError
from reaction_diffusion.params import Parameters
from reaction_diffusion.presets import (
    PRESET_ORDER, PRESETS, SLIDER_DEFS, get_preset, list_presets,
)


def test_defaults_match_classic_setup():
    p = Parameters()
    assert (p.DA, p.DB, p.F, p.K, p.dt) == (1.0, 0.5, 0.055, 0.062, 1.0)


def test_any_finite_value_is_accepted():
    p = Parameters.create(DA=5.0, DB=-1.0, F=3.0, K=0.0, dt=-0.5)
    assert p.DB == -1.0 and p.dt == -0.5
    p.F = 0.5
    assert p.F == 0.5


@pytest.mark.parametrize("bad", [math.nan, math.inf, -math.inf])
def test_non_finite_rejected(bad):
    with pytest.raises(InvalidConfigurationError):
        Parameters.create(F=bad)
    p = Parameters()
    with pytest.raises(InvalidConfigurationError):
        p.update(dt=bad)
    assert p.dt == 1.0


def test_update_is_all_or_nothing():
    p = Parameters()
    with pytest.raises(InvalidConfigurationError):
        p.update(DA=0.3, K=math.nan)
    assert p.DA == 1.0, "a rejected update must not apply any value"
    p.update(DA=0.3, K=0.05)
    assert (p.DA, p.K) == (0.3, 0.05)


def test_unknown_field_rejected():
    p = Parameters()
    with pytest.raises(InvalidConfigurationError):
        p.update(feed=0.03)


def test_snapshot_is_detached():
    p = Parameters()
    snap = p.snapshot()
    p.update(F=0.01)
    assert snap.F == 0.055
    with pytest.raises(AttributeError):
        snap.F = 0.2


def test_from_preset():
    p = Parameters.from_preset("maze", dt=0.5)
    assert p.F == PRESETS["maze"]["F"]
    assert p.K == PRESETS["maze"]["K"]
    assert p.dt == 0.5
    with pytest.raises(InvalidConfigurationError):
        Parameters.from_preset("no_such_preset")


def test_presets_are_valid_and_ordered():
    assert PRESET_ORDER[0] == "default"
    assert [k for k, _, _ in list_presets()] == PRESET_ORDER
    for key in PRESET_ORDER:
        preset = get_preset(key)
        assert preset is not None, key
        Parameters.create(DA=preset["DA"], DB=preset["DB"], F=preset["F"], K=preset["K"])
    assert get_preset("nope") is None


def test_slider_ranges():
    ranges = {s["key"]: (s["min"], s["max"]) for s in SLIDER_DEFS}
    assert ranges == {
        "DA": (0.0, 1.0),
        "DB": (0.0, 1.0),
        "F": (0.002, 0.12),
        "K": (0.01, 0.07),
    }
    assert "dt" not in ranges
    defaults = Parameters()
    for s in SLIDER_DEFS:
        assert s["default"] == getattr(defaults, s["key"])


if __name__ == "__main__":
    print("\n=== Testing Parameters ===\n")
    test_defaults_match_classic_setup()
    test_any_finite_value_is_accepted()
    for bad in (math.nan, math.inf, -math.inf):
        test_non_finite_rejected(bad)
    test_update_is_all_or_nothing()
    test_unknown_field_rejected()
    test_snapshot_is_detached()
    test_from_preset()
    test_presets_are_valid_and_ordered()
    test_slider_ranges()
    print("\n✓ All tests passed!\n")
