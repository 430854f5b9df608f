"""
Config loader for the gesture coincidence countdown.
Loads YAML configuration with dataclass validation.
"""
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Optional
import yaml


VARIANTS = ("reactive", "imperative")


@dataclass
class TimerConfig:
    interval_ms: int = 1000   # Length of one time unit between ticks

    def __post_init__(self):
        if int(self.interval_ms) <= 0:
            raise ValueError(f"timer.interval_ms must be positive, got {self.interval_ms}")
        self.interval_ms = int(self.interval_ms)


@dataclass
class ReactorConfig:
    variant: str = "reactive"

    def __post_init__(self):
        self.variant = str(self.variant).lower()
        if self.variant not in VARIANTS:
            raise ValueError(f"reactor.variant must be one of {VARIANTS}, got {self.variant!r}")


@dataclass
class LoggingConfig:
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class DemoConfig:
    scenario: object = "complete"  # Built-in name or a list of steps
    grace_ms: int = 500            # Idle time after the last event before quitting


@dataclass
class Config:
    timer: TimerConfig = field(default_factory=TimerConfig)
    reactor: ReactorConfig = field(default_factory=ReactorConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    demo: DemoConfig = field(default_factory=DemoConfig)


_SECTIONS = {
    'timer': TimerConfig,
    'reactor': ReactorConfig,
    'logging': LoggingConfig,
    'demo': DemoConfig,
}


def _section(data: dict, name: str):
    """Build one config section, ignoring unknown keys."""
    cls = _SECTIONS[name]
    section = data.get(name)
    if section is None:
        return cls()
    if not isinstance(section, dict):
        raise ValueError(f"Config section '{name}' must be a mapping, got {type(section).__name__}")
    known = {f.name for f in fields(cls)}
    return cls(**{k: v for k, v in section.items() if k in known})


def load_config(config_path: Optional[Path] = None) -> Config:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to config file. If None, uses config.yaml
                    in project root.

    Returns:
        Config dataclass with all settings. Missing file means defaults.

    Raises:
        ValueError: a section is not a mapping or holds an invalid value
        yaml.YAMLError: the file is not valid YAML
    """
    if config_path is None:
        config_path = Path(__file__).parent.parent.parent / "config.yaml"

    config_path = Path(config_path)

    if not config_path.exists():
        return Config()

    with open(config_path, 'r') as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"{config_path} must hold a mapping of sections")

    return Config(**{name: _section(data, name) for name in _SECTIONS})
