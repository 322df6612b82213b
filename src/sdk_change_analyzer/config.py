"""
Configuration loading and validation for SDK Change Analyzer.

This module handles configuration file parsing, validation, and provides
sensible defaults for all configuration options. A Config value is passed
explicitly into each component; nothing reads it from global state.
"""

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field

CONFIG_FILE_NAMES = [".sdk-change-analyzer.yaml", ".sdk-change-analyzer.yml"]


class PathsConfig(BaseModel):
    """Configuration for locating the generated-code subtree."""

    generated_marker: str = Field(
        default="generated",
        description="Path segment identifying the generated-code subtree.",
    )
    api_subdir: str = Field(
        default="apis",
        description="Path segment identifying generated API files.",
    )
    client_marker: str = Field(
        default="client",
        description="Path segment identifying the hand-written wrapper subtree.",
    )
    diff_relative_to_generated: bool = Field(
        default=False,
        description="Treat every diff path as inside the generated subtree.",
    )


class LoaderConfig(BaseModel):
    """Configuration for reading source snapshots from disk."""

    include_patterns: list[str] = Field(
        default=["**/*.ts", "**/*.js"],
        description="Glob patterns for files to include in analysis.",
    )
    exclude_patterns: list[str] = Field(
        default=["**/node_modules/**", "**/dist/**", "**/*.test.*", "**/*.spec.*"],
        description="Glob patterns for files to exclude from analysis.",
    )
    max_file_size: int = Field(
        default=50000,
        gt=0,
        description="Files larger than this (bytes) are replaced by a marker text.",
    )
    max_workers: int = Field(
        default=8,
        ge=1,
        description="Number of concurrent file reads.",
    )
    read_timeout: Optional[float] = Field(
        default=30.0,
        gt=0,
        description="Seconds to wait for all reads of one directory.",
    )


class ThresholdsConfig(BaseModel):
    """Affected-import count thresholds for a wrapper file's risk tier."""

    high_imports: int = Field(default=5, ge=1)
    medium_imports: int = Field(default=2, ge=1)


class ScoringConfig(BaseModel):
    """
    Point table for the overall risk score.

    Each table is a list of (threshold, points) pairs in descending
    threshold order; the first strictly exceeded threshold wins.
    """

    total_files: list[tuple[int, int]] = Field(default=[(20, 3), (10, 2), (5, 1)])
    affected_wrappers: list[tuple[int, int]] = Field(default=[(3, 3), (1, 2), (0, 1)])
    generated_api_changes: list[tuple[int, int]] = Field(default=[(10, 2), (5, 1)])
    high_score: int = Field(default=6, description="Minimum score for HIGH.")
    medium_score: int = Field(default=3, description="Minimum score for MEDIUM.")


class OutputConfig(BaseModel):
    """Configuration for output formatting."""

    colorize: bool = Field(
        default=True,
        description="Use colors in terminal output.",
    )
    verbose: bool = Field(
        default=False,
        description="Enable verbose output.",
    )


class Config(BaseModel):
    """Root configuration model for SDK Change Analyzer."""

    paths: PathsConfig = Field(default_factory=PathsConfig)
    loader: LoaderConfig = Field(default_factory=LoaderConfig)
    thresholds: ThresholdsConfig = Field(default_factory=ThresholdsConfig)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    class Config:
        """Pydantic model configuration."""

        extra = "forbid"


def load_config(config_path: Optional[Path] = None) -> Config:
    """
    Load configuration from a YAML file.

    Args:
        config_path: Path to the configuration file. If None, returns defaults.

    Returns:
        Config object with loaded or default values.

    Raises:
        FileNotFoundError: If the specified config file doesn't exist.
        ValueError: If the config file is invalid.
    """
    if config_path is None:
        return Config()

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return Config(**data)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in configuration file: {e}") from e
    except Exception as e:
        raise ValueError(f"Failed to load configuration: {e}") from e


def find_config_file(start_path: Path) -> Optional[Path]:
    """
    Search for a configuration file starting from the given path.

    Searches for `.sdk-change-analyzer.yaml` or `.sdk-change-analyzer.yml`
    in the start path and parent directories.

    Args:
        start_path: Directory to start searching from.

    Returns:
        Path to the config file if found, None otherwise.
    """
    current = start_path.resolve()
    while current != current.parent:
        for name in CONFIG_FILE_NAMES:
            config_path = current / name
            if config_path.exists():
                return config_path
        current = current.parent

    return None
