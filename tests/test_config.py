from __future__ import annotations

import json

import pytest

from ghpulse.config import ConfigError, PulseConfig, load_repo_file, parse_repo_list


@pytest.fixture(autouse=True)
def no_env_token(monkeypatch):
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)


def test_config_defaults(tmp_path):
    config = PulseConfig.load(tmp_path)

    assert config.token is None
    assert config.api_base_url == "https://api.github.com"
    assert config.window_days == 7
    assert config.timeout == 30.0
    assert config.max_workers == 8
    assert config.hyperlinks == "auto"


def test_config_load_file(tmp_path):
    (tmp_path / "ghpulse.yml").write_text(
        """
token: file-token
api_base_url: https://github.example.com/api/v3
window_days: 14
timeout: 10
max_workers: 2
hyperlinks: false
        """.strip()
    )

    config = PulseConfig.load(tmp_path)

    assert config.token == "file-token"
    assert config.api_base_url == "https://github.example.com/api/v3"
    assert config.window_days == 14
    assert config.timeout == 10.0
    assert config.max_workers == 2
    assert config.hyperlinks == "false"


def test_env_token_overrides_file(tmp_path, monkeypatch):
    (tmp_path / "ghpulse.yml").write_text("token: file-token")
    monkeypatch.setenv("GITHUB_TOKEN", "env-token")

    config = PulseConfig.load(tmp_path)

    assert config.token == "env-token"


def test_config_rejects_bad_hyperlinks(tmp_path):
    (tmp_path / "ghpulse.yml").write_text("hyperlinks: sometimes")

    with pytest.raises(ConfigError):
        PulseConfig.load(tmp_path)


def test_config_rejects_non_mapping(tmp_path):
    (tmp_path / "ghpulse.yml").write_text("- just\n- a list\n")

    with pytest.raises(ConfigError):
        PulseConfig.load(tmp_path)


def test_parse_repo_list():
    assert parse_repo_list("westh/telemaster, octokit/octokit.js,") == [
        "westh/telemaster",
        "octokit/octokit.js",
    ]


@pytest.mark.parametrize("value", ["telemaster", "westh/", "/telemaster", "a/b/c"])
def test_parse_repo_list_rejects_malformed(value):
    with pytest.raises(ConfigError):
        parse_repo_list(value)


def test_load_repo_file(tmp_path):
    path = tmp_path / "repos.json"
    path.write_text(json.dumps(["westh/telemaster", "octokit/octokit.js"]))

    assert load_repo_file(path) == ["westh/telemaster", "octokit/octokit.js"]


def test_load_repo_file_missing(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        load_repo_file(tmp_path / "missing.json")


def test_load_repo_file_invalid_json(tmp_path):
    path = tmp_path / "repos.json"
    path.write_text("westh/telemaster")

    with pytest.raises(ConfigError, match="not valid JSON"):
        load_repo_file(path)


def test_load_repo_file_requires_array_of_strings(tmp_path):
    path = tmp_path / "repos.json"
    path.write_text(json.dumps({"repos": ["westh/telemaster"]}))

    with pytest.raises(ConfigError, match="array of strings"):
        load_repo_file(path)


def test_load_repo_file_invalid_utf8(tmp_path):
    path = tmp_path / "repos.json"
    path.write_bytes(b'["own\xff/er"]')

    with pytest.raises(ConfigError, match="not valid UTF-8"):
        load_repo_file(path)


def test_load_repo_file_is_directory(tmp_path):
    path = tmp_path / "repos.json"
    path.mkdir()

    with pytest.raises(ConfigError, match="Cannot read repository file"):
        load_repo_file(path)


@pytest.mark.parametrize(
    "content",
    [
        "api_base_url: null",
        "api_base_url: ''",
        "api_base_url: 42",
        "timeout: 0",
        "timeout: -5",
        "window_days: 0",
        "window_days: -1",
        "max_workers: 0",
        "timeout: soon",
    ],
)
def test_config_rejects_invalid_values(tmp_path, content):
    (tmp_path / "ghpulse.yml").write_text(content)

    with pytest.raises(ConfigError):
        PulseConfig.load(tmp_path)
