"""Tests for the configuration system."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from step_orchestrator.config import Config, _apply_env_overrides, _apply_toml, load_config


def test_config_defaults():
	"""Config should have sensible defaults."""
	config = Config()
	assert config.config_dir.is_absolute()
	assert config.data_dir.is_absolute()
	assert config.log_dir == config.data_dir / "logs"
	assert config.default_timeout_ms == 5000
	assert config.max_concurrency == 5
	assert config.enforce_timeouts is False
	assert config.dependency_failure == "skip"


def test_invalid_dependency_failure():
	with pytest.raises(ValueError):
		Config(dependency_failure="abort")


def test_invalid_max_concurrency():
	with pytest.raises(ValueError, match="max_concurrency"):
		Config(max_concurrency=0)


def test_env_zero_concurrency_rejected():
	with patch.dict(os.environ, {"STEP_ORCHESTRATOR_MAX_CONCURRENCY": "0"}):
		with pytest.raises(ValueError, match="max_concurrency"):
			_apply_env_overrides(Config())


def test_env_bad_number_names_variable():
	"""A value that does not parse names the variable it came from."""
	with patch.dict(os.environ, {"STEP_ORCHESTRATOR_MAX_RETRIES": "three"}):
		with pytest.raises(ValueError, match="STEP_ORCHESTRATOR_MAX_RETRIES"):
			_apply_env_overrides(Config())


def test_config_env_overrides():
	"""Environment variables should override defaults."""
	config = Config()
	with patch.dict(os.environ, {
		"STEP_ORCHESTRATOR_DATA_DIR": "/tmp/test-data",
		"STEP_ORCHESTRATOR_MAX_CONCURRENCY": "3",
		"STEP_ORCHESTRATOR_ENFORCE_TIMEOUTS": "true",
		"STEP_ORCHESTRATOR_RETRY_BACKOFF_S": "0.5",
	}):
		config = _apply_env_overrides(config)
		assert config.data_dir == Path("/tmp/test-data")
		assert config.max_concurrency == 3
		assert config.enforce_timeouts is True
		assert config.retry_backoff_s == 0.5
		# Derived paths should be recomputed
		assert config.log_dir == Path("/tmp/test-data/logs")


def test_config_toml(tmp_path: Path):
	"""config.toml values should be applied."""
	config_dir = tmp_path / "config"
	config_dir.mkdir()
	(config_dir / "config.toml").write_text(
		'default_timeout_ms = 1200\n'
		'dependency_failure = "continue"\n'
		'unknown_key = 1\n'
	)
	config = _apply_toml(Config(config_dir=config_dir, data_dir=tmp_path / "data"))

	assert config.default_timeout_ms == 1200
	assert config.dependency_failure == "continue"
	assert not hasattr(config, "unknown_key")


def test_config_ensure_dirs(tmp_path: Path):
	"""ensure_dirs should create all required directories."""
	config = Config(
		config_dir=tmp_path / "config",
		data_dir=tmp_path / "data",
	)
	assert not config.config_dir.exists()

	config.ensure_dirs()

	assert config.config_dir.exists()
	assert config.data_dir.exists()
	assert config.log_dir.exists()


def test_load_config_precedence(tmp_path: Path):
	"""Env vars win over config.toml."""
	config_dir = tmp_path / "config"
	config_dir.mkdir()
	(config_dir / "config.toml").write_text("max_retries = 4\nmax_concurrency = 2\n")

	with patch.dict(os.environ, {
		"STEP_ORCHESTRATOR_CONFIG_DIR": str(config_dir),
		"STEP_ORCHESTRATOR_DATA_DIR": str(tmp_path / "data"),
		"STEP_ORCHESTRATOR_MAX_CONCURRENCY": "7",
	}):
		config = load_config()

	assert config.max_retries == 4
	assert config.max_concurrency == 7
	assert config.data_dir.exists()
	assert config.log_dir.exists()
