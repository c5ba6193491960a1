from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field

from omnitrace import ARGS_DIR

logger = logging.getLogger(__name__)


# =============================================================================
# OmnitraceConfig (args/omnitrace.yaml)
# =============================================================================

class StorageConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    backend: Literal["sqlite", "memory"] = Field(default="sqlite")
    database_path: str = Field(default="data/omnitrace.db")


class SessionConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    idle_timeout_seconds: int = Field(default=60, ge=1)
    recover_unclosed_sessions: bool = Field(default=True)


class TimelineConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    cognitive_mode: Literal["focus", "flow", "recovery", "analysis"] = Field(default="focus")


class HeatmapConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    bin_count: int = Field(default=100, ge=1)


class OmniBrainConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    intelligence_mode: Literal["explain", "analyze", "coach", "silent"] = Field(default="explain")
    context_scope: Literal["today", "week", "all"] = Field(default="today")
    history_path: str = Field(default="data/omnibrain_chat.json")
    record_queries: bool = Field(default=True)


class PrivacyConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    private_mode: bool = Field(default=False)


class OmnitraceConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    storage: StorageConfig = Field(default_factory=StorageConfig)
    session: SessionConfig = Field(default_factory=SessionConfig)
    timeline: TimelineConfig = Field(default_factory=TimelineConfig)
    heatmap: HeatmapConfig = Field(default_factory=HeatmapConfig)
    omnibrain: OmniBrainConfig = Field(default_factory=OmniBrainConfig)
    privacy: PrivacyConfig = Field(default_factory=PrivacyConfig)


_CONFIG_MAP: dict[str, type[BaseModel]] = {
    "omnitrace": OmnitraceConfig,
}


def load_and_validate(
    config_name: str = "omnitrace",
    model_class: type[BaseModel] | None = None,
    args_dir: Path | None = None,
) -> BaseModel:
    if model_class is None:
        model_class = _CONFIG_MAP.get(config_name)
        if model_class is None:
            raise ValueError(f"Unknown config: {config_name}. Available: {list(_CONFIG_MAP.keys())}")

    yaml_path = (args_dir or ARGS_DIR) / f"{config_name}.yaml"

    try:
        if yaml_path.exists():
            with open(yaml_path) as f:
                raw = yaml.safe_load(f) or {}
        else:
            raw = {}

        return model_class.model_validate(raw)
    except Exception as e:
        logger.warning(f"Config validation failed for {config_name}: {e}, using defaults")
        return model_class()


def load_config(args_dir: Path | None = None) -> OmnitraceConfig:
    """Load args/omnitrace.yaml, falling back to defaults."""
    return load_and_validate("omnitrace", OmnitraceConfig, args_dir=args_dir)


__all__ = [
    "StorageConfig",
    "SessionConfig",
    "TimelineConfig",
    "HeatmapConfig",
    "OmniBrainConfig",
    "PrivacyConfig",
    "OmnitraceConfig",
    "load_and_validate",
    "load_config",
]
