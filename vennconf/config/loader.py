"""Configuration loading utilities for vennconf."""

from pathlib import Path
from typing import Optional

import yaml
from pydantic import ValidationError

from .models import VennConfConfig

DEFAULT_CONFIG_NAME = "vennconf"


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    if Path("configs").exists():
        return Path("configs")

    config_dir = Path(__file__).parent.parent.parent / "configs"
    if config_dir.exists():
        return config_dir

    raise FileNotFoundError("configs/ directory not found")


def load_yaml_config(config_name: str) -> dict:
    """Load YAML configuration file from the configs directory."""
    config_path = get_config_dir() / f"{config_name}.yaml"

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Failed to parse YAML config {config_path}: {e}")


def load_config(config_path: Optional[str] = None) -> VennConfConfig:
    """Load and validate the vennconf configuration.

    Args:
        config_path: Optional path to config file. If None, uses configs/vennconf.yaml

    Returns:
        Validated VennConfConfig object

    Raises:
        FileNotFoundError: If config file not found
        ValueError: If the file cannot be parsed or validation fails
    """
    if config_path:
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")
        try:
            with open(path, 'r', encoding='utf-8') as f:
                config_dict = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Failed to parse YAML config {path}: {e}")
    else:
        config_dict = load_yaml_config(DEFAULT_CONFIG_NAME)

    try:
        return VennConfConfig(**config_dict)
    except ValidationError as e:
        raise ValueError(f"Configuration validation failed: {e}")


def save_config(config: VennConfConfig, config_path: Optional[str] = None) -> Path:
    """Save configuration to a YAML file and return its path."""
    if config_path:
        output_path = Path(config_path)
    else:
        output_path = get_config_dir() / f"{DEFAULT_CONFIG_NAME}.yaml"

    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w', encoding='utf-8') as f:
        yaml.dump(config.model_dump(), f, default_flow_style=False, allow_unicode=True, sort_keys=False)
    return output_path
