"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, nanocad.toml only contains
overrides. An empty file (or no file at all) is a valid configuration.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from nanocad.domain.tokenizer import TokenizerLimits


class LimitsConfig(BaseModel):
    """[limits] section."""

    model_config = {"frozen": True}

    command_max_size: int = Field(default=15, ge=1)
    argument_max_size: int = Field(default=64, ge=1)
    max_arguments: int = Field(default=8, ge=1)
    max_substitutions: int = Field(default=64, ge=1)

    def tokenizer_limits(self) -> TokenizerLimits:
        return TokenizerLimits(
            command_max_size=self.command_max_size,
            argument_max_size=self.argument_max_size,
            max_arguments=self.max_arguments,
        )


class LayersConfig(BaseModel):
    """[layers] section — the implicit layer 0."""

    model_config = {"frozen": True}

    default_name: str = "Default"
    default_color: str = Field(default="f9f9f9", pattern=r"^[0-9A-Fa-f]{6}$")


class DimensionsConfig(BaseModel):
    """[dimensions] section."""

    model_config = {"frozen": True}

    pin_length: int = Field(default=10, ge=0)


class EngineConfig(BaseModel):
    """Everything a session needs, independent of how it was loaded."""

    model_config = {"frozen": True}

    limits: LimitsConfig = Field(default_factory=LimitsConfig)
    layers: LayersConfig = Field(default_factory=LayersConfig)
    dimensions: DimensionsConfig = Field(default_factory=DimensionsConfig)
