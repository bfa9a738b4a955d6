from __future__ import annotations

from enum import Enum
from pathlib import Path

import yaml
from expandvars import expandvars
from pydantic import BaseModel, ConfigDict, Field, field_validator

from anima.pacer import DEFAULT_PACE_MS
from anima.session import DEFAULT_FAILURE_MESSAGE, DEFAULT_SUCCESS_MESSAGE


class ColorMode(str, Enum):
    AUTO = "auto"
    ALWAYS = "always"
    NEVER = "never"

    @property
    def enabled(self) -> bool | None:
        """Console ``color`` argument: None lets the console decide."""
        if self is ColorMode.ALWAYS:
            return True
        if self is ColorMode.NEVER:
            return False
        return None


class OutputConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    width: int | None = Field(default=None, ge=1)
    color: ColorMode = ColorMode.AUTO


class AnimaConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    pace_ms: int = Field(default=DEFAULT_PACE_MS, ge=0)
    output: OutputConfig = OutputConfig()
    success_message: str = DEFAULT_SUCCESS_MESSAGE
    failure_message: str = DEFAULT_FAILURE_MESSAGE
    log_file: str | None = None
    logger_name: str = "anima_run"
    verbose: bool = False

    @field_validator("log_file")
    @classmethod
    def expand_log_file(cls, v: str | None) -> str | None:
        """Expand ${VAR} references; unset variables without a default are rejected."""
        if v is None:
            return v
        try:
            return expandvars(v, nounset=True)
        except Exception as e:
            raise ValueError(f"log_file '{v}' references an unset variable: {e}") from e

    @field_validator("logger_name")
    @classmethod
    def logger_name_must_not_be_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("logger_name must not be blank")
        return v


def load_config(path: Path) -> AnimaConfig:
    """Load and validate a config from a YAML file. An empty file gives defaults."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        raw = yaml.safe_load(f)

    if raw is None:
        return AnimaConfig()
    if not isinstance(raw, dict):
        raise ValueError(f"Config file must contain a mapping: {path}")

    config = AnimaConfig(**raw)

    # Resolve a relative log_file against the config file location
    if config.log_file and not Path(config.log_file).is_absolute():
        config.log_file = str((path.parent.resolve() / config.log_file).resolve())

    return config
