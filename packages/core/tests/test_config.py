"""Tests for configuration loading."""

import pytest

from prsweep_core.config import load_config, read_config_text


def test_defaults_applied_when_no_config_file(tmp_path):
    config = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    assert config["identity"] == "author"
    assert config["bot_login"] == "claude"
    assert config["bot_type"] == "Bot"
    assert config["max_workers"] == 8
    assert config["thread_page_size"] == 100
    assert config["exclude"] == {}


def test_config_file_overrides_defaults(tmp_path):
    cfg = tmp_path / ".claude-review.yml"
    cfg.write_text("identity: marker\nbot_login: reviewer\nmax_workers: 2\n")
    config = load_config(config_path=str(cfg))
    assert config["identity"] == "marker"
    assert config["bot_login"] == "reviewer"
    assert config["max_workers"] == 2


def test_exclude_section_loaded(tmp_path):
    cfg = tmp_path / ".claude-review.yml"
    cfg.write_text("exclude:\n  title_patterns:\n    - schema sync\n")
    config = load_config(config_path=str(cfg))
    assert config["exclude"]["title_patterns"] == ["schema sync"]


def test_cli_overrides_config_file(tmp_path):
    cfg = tmp_path / ".claude-review.yml"
    cfg.write_text("identity: marker\n")
    config = load_config(config_path=str(cfg), cli_overrides={"identity": "author"})
    assert config["identity"] == "author"


def test_none_cli_overrides_ignored(tmp_path):
    cfg = tmp_path / ".claude-review.yml"
    cfg.write_text("bot_login: reviewer\n")
    config = load_config(config_path=str(cfg), cli_overrides={"bot_login": None})
    assert config["bot_login"] == "reviewer"


def test_empty_config_file(tmp_path):
    cfg = tmp_path / ".claude-review.yml"
    cfg.write_text("")
    config = load_config(config_path=str(cfg))
    assert config["identity"] == "author"


def test_non_mapping_config_rejected(tmp_path):
    cfg = tmp_path / ".claude-review.yml"
    cfg.write_text("- just\n- a list\n")
    with pytest.raises(ValueError, match="mapping"):
        load_config(config_path=str(cfg))


def test_github_token_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("GITHUB_TOKEN", "gh-token")
    config = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    assert config["github_token"] == "gh-token"


def test_exclude_mapping_is_not_shared_reference(tmp_path):
    """Mutating one config's exclude mapping must not affect another."""
    config_a = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    config_b = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    config_a["exclude"]["title_patterns"] = ["x"]
    assert config_b["exclude"] == {}


def test_read_config_text(tmp_path):
    cfg = tmp_path / ".claude-review.yml"
    cfg.write_text("exclude: {}\n")
    assert read_config_text(str(cfg)) == "exclude: {}\n"
    assert read_config_text(str(tmp_path / "missing.yml")) is None


def test_gh_token_used_when_github_token_unset(monkeypatch, tmp_path):
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.setenv("GH_TOKEN", "gh-cli-token")
    config = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    assert config["github_token"] == "gh-cli-token"


@pytest.mark.parametrize("page_size", [0, 101, -5, "100", 2.5, True])
def test_thread_page_size_outside_graphql_limits_rejected(tmp_path, page_size):
    with pytest.raises(ValueError, match="thread_page_size"):
        load_config(config_path=str(tmp_path / "nonexistent.yml"), cli_overrides={"thread_page_size": page_size})


@pytest.mark.parametrize("page_size", [1, 50, 100])
def test_thread_page_size_within_limits_accepted(tmp_path, page_size):
    config = load_config(config_path=str(tmp_path / "nonexistent.yml"), cli_overrides={"thread_page_size": page_size})
    assert config["thread_page_size"] == page_size


def test_thread_page_size_from_file_validated(tmp_path):
    cfg = tmp_path / ".claude-review.yml"
    cfg.write_text("thread_page_size: 500\n")
    with pytest.raises(ValueError, match="between 1 and 100"):
        load_config(config_path=str(cfg))


@pytest.mark.parametrize("workers", [0, -1, "8"])
def test_max_workers_must_be_positive_integer(tmp_path, workers):
    with pytest.raises(ValueError, match="max_workers"):
        load_config(config_path=str(tmp_path / "nonexistent.yml"), cli_overrides={"max_workers": workers})
