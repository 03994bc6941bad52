"""Pydantic models for vennconf configuration validation."""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ..pvalues.registry import available_calculators, get_calculator_class


class CalibratorConfig(BaseModel):
    """P-value calculator selection."""
    name: str = Field("Standard", description="Calculator name or numeric id")
    seed: Optional[int] = Field(None, ge=0, description="RNG seed for the Smoothed calculator")

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        key = int(v) if str(v).isdigit() else v
        try:
            return get_calculator_class(key).name
        except ValueError:
            raise ValueError(f"name must be one of {available_calculators()}, got {v!r}")


class SamplingConfig(BaseModel):
    """Sampling strategy producing proper training / calibration splits."""
    strategy: Literal["random", "folded"] = Field("folded", description="Sampling strategy")
    num_samples: int = Field(10, ge=1, description="Number of splits (folds for 'folded')")
    calibration_ratio: float = Field(0.2, gt=0, lt=1, description="Calibration share for 'random'")
    stratified: bool = Field(False, description="Keep label proportions in every split")

    @model_validator(mode='after')
    def validate_folds(self):
        if self.strategy == "folded" and self.num_samples < 2:
            raise ValueError('folded sampling needs at least 2 folds')
        return self


class ValidationConfig(BaseModel):
    """Minimum sizes of proper training and calibration sets."""
    min_proper_training_size: int = Field(5, ge=1, description="Minimum proper training records")
    min_calibration_per_class: int = Field(3, ge=1, description="Minimum calibration records per label")
    large_set_threshold: int = Field(50, ge=1, description="Skip per-label checks above this size")


class VennConfConfig(BaseModel):
    """Top level configuration."""
    project_name: str = Field("vennconf", description="Project name")
    version: str = Field("0.1.0", description="Configuration version")
    seed: int = Field(42, ge=0, description="Seed for sampling strategies")

    calibrator: CalibratorConfig = Field(default_factory=CalibratorConfig)
    sampling: SamplingConfig = Field(default_factory=SamplingConfig)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)

    confidence_levels: List[float] = Field([0.8, 0.9, 0.95], description="Evaluation confidences")
    calibration_bins: int = Field(10, ge=5, le=100, description="Bins of the calibration curve")
    log_level: str = Field("INFO", description="Logging level")

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        level = str(v).upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"log_level must be a logging level name, got {v!r}")
        return level

    @field_validator('confidence_levels')
    @classmethod
    def validate_confidences(cls, v):
        if not v:
            raise ValueError('at least one confidence level is required')
        for c in v:
            if c < 0 or c > 1:
                raise ValueError(f'confidence levels must be in [0,1], got {c}')
        return sorted(v)
