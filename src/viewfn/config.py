"""Configuration parsing for viewfn.yaml"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, ValidationError

from viewfn.exceptions import ConfigError

CONFIG_FILENAMES = ("viewfn.yaml", "viewfn.yml")

OnFailure = Literal["keep", "omit", "raise"]


class ViewfnConfig(BaseModel):
    """Full viewfn.yaml configuration"""

    seed: int | None = None  # fixed seed for shuffle / math.Rand
    base_url: str = "http://localhost"
    namespaces: list[str] | None = None  # None = every namespace
    aliases: bool = True
    filters: bool = True
    on_failure: OnFailure = "omit"
    truncate_suffix: str = "…"
    functions: dict[str, str] = Field(default_factory=dict)  # alias -> canonical name

    model_config = {"extra": "forbid"}

    @classmethod
    def load(cls, path: Path) -> "ViewfnConfig":
        """Load config from yaml file; a missing file gives the defaults.

        Raises:
            ConfigError: If the file is not valid YAML or does not match the schema.
        """
        if not path.exists():
            return cls()

        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Expected a mapping at the top of {path}")

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"Invalid config in {path}: {e}") from e


def find_config_file(start: Path | None = None) -> Path | None:
    """Find viewfn.yaml in the start directory (default: cwd) or its parents."""
    current = (start or Path.cwd()).resolve()
    for parent in [current, *current.parents]:
        for filename in CONFIG_FILENAMES:
            candidate = parent / filename
            if candidate.exists():
                return candidate
    return None
