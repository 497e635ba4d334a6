from __future__ import annotations

from pathlib import Path

import tomllib
from pydantic import BaseModel, ConfigDict, Field, field_validator

from contract.baseline import PUBLIC_API_FILE_NAME, is_public_api_file_name

CONFIG_FILENAME = "publicapi.toml"


class PublicApiConfig(BaseModel):
    """Configuration for a public API check of one repository."""

    model_config = ConfigDict(extra="forbid")

    baseline: str = Field(
        default=PUBLIC_API_FILE_NAME,
        description="Baseline file, relative to the repository root",
    )
    additional_files: list[str] = Field(
        default_factory=list,
        description="Extra additional files offered to the analysis session",
    )
    source_root: str = Field(
        default=".",
        description="Directory scanned for Python sources, relative to the root",
    )
    include: list[str] = Field(
        default_factory=list,
        description="Glob patterns for files to include (empty = all Python files)",
    )
    exclude: list[str] = Field(
        default_factory=list,
        description="Glob patterns for files to exclude",
    )
    nested_gitignore: bool = Field(
        default=False,
        description=(
            "Enable nested .gitignore composition (default: false for root-only)"
        ),
    )
    jobs: int = Field(
        default=4,
        ge=1,
        description="Worker threads used to observe symbols",
    )

    @field_validator("baseline", "source_root")
    @classmethod
    def validate_relative_path(cls, v: str) -> str:
        if not v:
            msg = "must be a non-empty relative path"
            raise ValueError(msg)
        if v.startswith("~") or Path(v).is_absolute():
            msg = "must be a relative path within the repo root"
            raise ValueError(msg)
        return v

    @field_validator("baseline")
    @classmethod
    def validate_baseline_name(cls, v: str) -> str:
        if not is_public_api_file_name(Path(v).name):
            msg = f"must name a {PUBLIC_API_FILE_NAME} file"
            raise ValueError(msg)
        return v


class ConfigError(Exception):
    """Raised when the config file or a command-line override is invalid."""


def resolve_within_root(root: Path, relative: str) -> Path:
    """Resolve a config-provided relative path, rejecting escapes from ``root``."""
    try:
        resolved_root = root.resolve()
        resolved = (resolved_root / relative).resolve()
    except OSError as exc:
        msg = f"Failed to resolve '{relative}': {exc}"
        raise ConfigError(msg) from exc

    try:
        resolved.relative_to(resolved_root)
    except ValueError as exc:
        msg = f"'{relative}' escapes the repository root"
        raise ConfigError(msg) from exc

    return resolved


def load_config(root: Path) -> PublicApiConfig:
    """Load configuration from publicapi.toml if it exists."""
    config_path = root / CONFIG_FILENAME

    if not config_path.is_file():
        return PublicApiConfig()

    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        return PublicApiConfig.model_validate(data)
    except Exception as e:
        msg = f"Invalid config in {config_path}: {e}"
        raise ConfigError(msg) from e
