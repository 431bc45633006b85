"""
Configuration management for GitHub Pulse Overview.

Settings come from, in increasing precedence:
- built-in defaults
- ghpulse.yml in the working directory (optional)
- the GITHUB_TOKEN environment variable
- command-line options

Also resolves the list of repositories from -r or -f.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .github import DEFAULT_MAX_WORKERS, DEFAULT_TIMEOUT, GITHUB_API_BASE


CONFIG_FILENAME = "ghpulse.yml"
HYPERLINK_MODES = ("auto", "true", "false")


class ConfigError(Exception):
    """Invalid configuration or repository list."""


@dataclass
class PulseConfig:
    """Complete GitHub Pulse Overview configuration."""
    token: str | None = None
    repos: list[str] = field(default_factory=list)
    api_base_url: str = GITHUB_API_BASE
    window_days: int = 7
    timeout: float = DEFAULT_TIMEOUT
    max_workers: int = DEFAULT_MAX_WORKERS
    hyperlinks: str = "auto"  # auto, true, false

    @classmethod
    def load(cls, directory: Path | None = None) -> "PulseConfig":
        """Load configuration from ghpulse.yml in directory and the environment."""
        directory = directory or Path.cwd()
        config = cls()

        config_path = directory / CONFIG_FILENAME
        if config_path.exists():
            with open(config_path) as f:
                try:
                    data = yaml.safe_load(f) or {}
                except yaml.YAMLError as e:
                    raise ConfigError(f"Invalid {CONFIG_FILENAME}: {e}")
            if not isinstance(data, dict):
                raise ConfigError(f"Invalid {CONFIG_FILENAME}: expected a mapping")
            config = cls._parse_config(data)

        env_token = os.environ.get("GITHUB_TOKEN")
        if env_token:
            config.token = env_token

        return config

    @classmethod
    def _parse_config(cls, data: dict[str, Any]) -> "PulseConfig":
        """Parse configuration dictionary."""
        hyperlinks = data.get("hyperlinks", "auto")
        if isinstance(hyperlinks, bool):
            hyperlinks = "true" if hyperlinks else "false"
        hyperlinks = str(hyperlinks).lower()
        if hyperlinks not in HYPERLINK_MODES:
            raise ConfigError(f"hyperlinks must be one of {', '.join(HYPERLINK_MODES)}")

        api_base_url = data.get("api_base_url", GITHUB_API_BASE)
        if not isinstance(api_base_url, str) or not api_base_url.strip():
            raise ConfigError(f"Invalid {CONFIG_FILENAME}: api_base_url must be a non-empty string")

        try:
            config = cls(
                token=data.get("token"),
                api_base_url=api_base_url.strip(),
                window_days=int(data.get("window_days", 7)),
                timeout=float(data.get("timeout", DEFAULT_TIMEOUT)),
                max_workers=int(data.get("max_workers", DEFAULT_MAX_WORKERS)),
                hyperlinks=hyperlinks,
            )
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid {CONFIG_FILENAME}: {e}")

        for name in ("window_days", "timeout", "max_workers"):
            if getattr(config, name) <= 0:
                raise ConfigError(f"Invalid {CONFIG_FILENAME}: {name} must be positive")

        return config


def parse_repo_list(value: str) -> list[str]:
    """Parse a comma-separated "owner/name" list."""
    return validate_repos(value.split(","))


def load_repo_file(path: str | Path) -> list[str]:
    """
    Load repositories from a JSON file.

    The file's top-level value must be an array of "owner/name" strings,
    e.g. ["westh/telemaster", "octokit/octokit.js"].
    """
    path = Path(path).expanduser()
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        raise ConfigError(f"Repository file not found: {path}")
    except json.JSONDecodeError as e:
        raise ConfigError(f"Repository file is not valid JSON: {path} ({e})")
    except UnicodeDecodeError as e:
        raise ConfigError(f"Repository file is not valid UTF-8: {path} ({e})")
    except OSError as e:
        raise ConfigError(f"Cannot read repository file: {path} ({e.strerror or e})")

    if not isinstance(data, list) or not all(isinstance(item, str) for item in data):
        raise ConfigError(f"Repository file must contain a JSON array of strings: {path}")

    return validate_repos(data)


def validate_repos(items: list[str]) -> list[str]:
    """Strip entries, drop empty ones and check the owner/name form."""
    repos = []
    for item in items:
        repo = item.strip()
        if not repo:
            continue
        owner, sep, name = repo.partition("/")
        if not sep or not owner or not name or "/" in name:
            raise ConfigError(f"Invalid repository '{repo}', expected owner/name")
        repos.append(repo)
    return repos
