"""Tests for global settings and how serialize/deserialize pick them up."""

import dataclasses

import pytest

from structclone import deserialize
from structclone import serialize
from structclone.exceptions import CyclicGraphError
from structclone.exceptions import DepthLimitError
from structclone.serialization import Serializer
from structclone.settings import StructcloneSettings
from structclone.settings import get_global_settings
from structclone.settings import set_global_settings


class TestSettings:
    """Tests for StructcloneSettings and the global accessors."""

    def test_defaults(self):
        """Cycle detection is on and depth is unbounded by default."""
        settings = StructcloneSettings()
        assert settings.detect_cycles is True
        assert settings.max_depth is None

    def test_frozen(self):
        """Settings instances are immutable."""
        with pytest.raises(dataclasses.FrozenInstanceError):
            StructcloneSettings().max_depth = 3  # type: ignore[misc]

    def test_set_and_get(self):
        """set_global_settings() replaces the instance returned by get_global_settings()."""
        settings = StructcloneSettings(max_depth=5)
        set_global_settings(settings)
        assert get_global_settings() is settings

    def test_global_max_depth_applies(self):
        """Module-level serialize/deserialize read the global settings at call time."""
        set_global_settings(StructcloneSettings(max_depth=1))
        with pytest.raises(DepthLimitError):
            serialize([[1]])
        with pytest.raises(DepthLimitError):
            deserialize([[1]])

    def test_global_cycle_detection_disabled(self):
        """Disabling cycle detection globally lets a cycle hit the recursion limit."""
        value = {}
        value["again"] = value
        with pytest.raises(CyclicGraphError):
            serialize(value)

        set_global_settings(StructcloneSettings(detect_cycles=False))
        with pytest.raises(RecursionError):
            serialize(value)

    def test_explicit_settings_override_global(self):
        """Settings passed to a Serializer win over the global ones."""
        set_global_settings(StructcloneSettings(max_depth=0))
        serializer = Serializer(settings=StructcloneSettings())
        assert serializer.serialize([[1]]) == [[1]]
