"""Configuration management for vennconf."""

from .factory import (
    configure_logging,
    create_acp_classifier,
    create_acp_regressor,
    create_avap,
    create_evaluation_config,
    create_pvalue_calculator,
    create_sampling_strategy,
    create_validator,
)
from .loader import get_config_dir, load_config, load_yaml_config, save_config
from .models import CalibratorConfig, SamplingConfig, ValidationConfig, VennConfConfig

__all__ = [
    "CalibratorConfig",
    "SamplingConfig",
    "ValidationConfig",
    "VennConfConfig",
    "get_config_dir",
    "load_config",
    "load_yaml_config",
    "save_config",
    "configure_logging",
    "create_pvalue_calculator",
    "create_sampling_strategy",
    "create_validator",
    "create_evaluation_config",
    "create_avap",
    "create_acp_classifier",
    "create_acp_regressor",
]
