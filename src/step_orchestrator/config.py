"""Configuration system using platformdirs for cross-platform paths."""

import os
import tomllib
from dataclasses import dataclass, field, fields
from pathlib import Path

import platformdirs

APP_NAME = "step-orchestrator"
ENV_PREFIX = "STEP_ORCHESTRATOR_"

DEPENDENCY_FAILURE_POLICIES = ("skip", "continue")


@dataclass
class Config:
	"""Central configuration with XDG/platform conventions."""

	config_dir: Path = field(default_factory=lambda: Path(platformdirs.user_config_dir(APP_NAME)))
	data_dir: Path = field(default_factory=lambda: Path(platformdirs.user_data_dir(APP_NAME)))

	# Derived paths
	log_dir: Path = field(init=False)

	# Scheduling
	default_timeout_ms: int = 5000
	max_concurrency: int = 5
	max_retries: int = 1
	retry_backoff_s: float = 0.0
	enforce_timeouts: bool = False
	dependency_failure: str = "skip"

	log_level: str = "INFO"

	def __post_init__(self) -> None:
		self.log_dir = self.data_dir / "logs"
		if self.dependency_failure not in DEPENDENCY_FAILURE_POLICIES:
			raise ValueError(
				f"dependency_failure must be one of {DEPENDENCY_FAILURE_POLICIES}, "
				f"got '{self.dependency_failure}'"
			)
		if self.max_concurrency < 1:
			raise ValueError(f"max_concurrency must be at least 1, got {self.max_concurrency}")

	def ensure_dirs(self) -> None:
		"""Create all required directories."""
		self.config_dir.mkdir(parents=True, exist_ok=True)
		self.data_dir.mkdir(parents=True, exist_ok=True)
		self.log_dir.mkdir(parents=True, exist_ok=True)

	def as_dict(self) -> dict[str, object]:
		return {
			f.name: str(getattr(self, f.name)) if isinstance(getattr(self, f.name), Path) else getattr(self, f.name)
			for f in fields(self)
		}


_PATH_FIELDS = {"config_dir", "data_dir"}


def _coerce(config: Config, attr: str, raw: object, source: str) -> object:
	"""Convert a raw toml/env value to the type of the existing attribute.

	Raises:
		ValueError: If the value does not parse, naming where it came from
	"""
	if attr in _PATH_FIELDS:
		return Path(os.path.expanduser(str(raw)))
	current = getattr(config, attr)
	if isinstance(current, bool):
		if isinstance(raw, bool):
			return raw
		return str(raw).strip().lower() in ("1", "true", "yes", "on")
	try:
		if isinstance(current, int):
			return int(raw)
		if isinstance(current, float):
			return float(raw)
	except (TypeError, ValueError) as e:
		raise ValueError(f"Invalid value for {source}: {raw!r} (expected {type(current).__name__})") from e
	return str(raw)


def _settable_fields() -> list[str]:
	return [f.name for f in fields(Config) if f.init]


def _apply_env_overrides(config: Config) -> Config:
	"""Apply STEP_ORCHESTRATOR_* environment variable overrides."""
	for attr in _settable_fields():
		val = os.getenv(ENV_PREFIX + attr.upper())
		if val:
			setattr(config, attr, _coerce(config, attr, val, ENV_PREFIX + attr.upper()))
	# Recompute derived paths after overrides
	config.__post_init__()
	return config


def _apply_toml(config: Config) -> Config:
	"""Apply config.toml overrides if file exists."""
	toml_path = config.config_dir / "config.toml"
	if not toml_path.exists():
		return config

	with open(toml_path, "rb") as f:
		data = tomllib.load(f)

	settable = set(_settable_fields())
	for key, val in data.items():
		if key in settable:
			setattr(config, key, _coerce(config, key, val, f"{toml_path.name} key '{key}'"))

	# Recompute derived paths after toml overrides
	config.__post_init__()
	return config


def load_config() -> Config:
	"""Load config with precedence: env vars > config.toml > defaults."""
	config = Config()
	# The config dir itself may be redirected from the environment
	env_config_dir = os.getenv(ENV_PREFIX + "CONFIG_DIR")
	if env_config_dir:
		config.config_dir = Path(os.path.expanduser(env_config_dir))
	config = _apply_toml(config)
	config = _apply_env_overrides(config)
	config.ensure_dirs()
	return config


# Singleton
_config: Config | None = None


def get_config() -> Config:
	"""Get or create the global config instance."""
	global _config
	if _config is None:
		_config = load_config()
	return _config
