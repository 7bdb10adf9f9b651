"""Tests for configuration models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from nanocad.config.models import DimensionsConfig, EngineConfig, LayersConfig, LimitsConfig
from nanocad.domain.tokenizer import TokenizerLimits


class TestLimitsConfig:
    def test_defaults(self) -> None:
        limits = LimitsConfig()
        assert limits.tokenizer_limits() == TokenizerLimits(15, 64, 8)
        assert limits.max_substitutions == 64

    def test_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            LimitsConfig(max_arguments=0)


class TestLayersConfig:
    def test_color_pattern(self) -> None:
        with pytest.raises(ValidationError):
            LayersConfig(default_color="f9f9f")


class TestEngineConfig:
    def test_sparse_sections(self) -> None:
        cfg = EngineConfig.model_validate({"dimensions": {"pin_length": 0}})
        assert cfg.dimensions == DimensionsConfig(pin_length=0)
        assert cfg.limits == LimitsConfig()

    def test_frozen(self) -> None:
        with pytest.raises(ValidationError):
            EngineConfig().limits.max_arguments = 3  # type: ignore[misc]
