"""Build calculators, sampling strategies, validators and predictors from configuration."""

import logging
from typing import Optional

from ..conformal.acp import ACPClassifier, ACPRegressor
from ..evaluation.evaluator import EvaluationConfig
from ..models.scorers import ScoringClassifier
from ..ncm.classification import NCMClassification
from ..ncm.regression import NCMRegression
from ..pvalues.base import PValueCalculator
from ..pvalues.registry import get_calculator
from ..pvalues.standard import SmoothedPValue
from ..sampling.strategies import FoldedSampling, RandomSampling, SamplingStrategy
from ..sampling.validator import TrainingSetValidator
from ..venn_abers.avap import AVAPClassifier
from .models import CalibratorConfig, SamplingConfig, ValidationConfig, VennConfConfig

logger = logging.getLogger(__name__)


def configure_logging(config: VennConfConfig) -> None:
    """Apply ``log_level`` to the root logger."""
    logging.basicConfig(
        level=config.log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    logging.getLogger().setLevel(config.log_level)


def create_pvalue_calculator(config: CalibratorConfig) -> PValueCalculator:
    calculator = get_calculator(config.name)
    if isinstance(calculator, SmoothedPValue) and config.seed is not None:
        calculator = calculator.with_seed(config.seed)
    logger.debug(f"Created p-value calculator {calculator.name}")
    return calculator


def create_sampling_strategy(config: SamplingConfig) -> SamplingStrategy:
    if config.strategy == "folded":
        return FoldedSampling(num_folds=config.num_samples, stratified=config.stratified)
    return RandomSampling(
        num_samples=config.num_samples,
        calibration_ratio=config.calibration_ratio,
        stratified=config.stratified,
    )


def create_validator(config: ValidationConfig) -> TrainingSetValidator:
    return TrainingSetValidator.from_config(config)


def create_evaluation_config(config: VennConfConfig, test_ratio: Optional[float] = None,
                             show_progress: bool = False) -> EvaluationConfig:
    """Evaluation settings sharing the seed, confidences and bins of ``config``."""
    params = {
        "seed": config.seed,
        "confidence_levels": config.confidence_levels,
        "calibration_bins": config.calibration_bins,
        "show_progress": show_progress,
    }
    if test_ratio is not None:
        params["test_ratio"] = test_ratio
    return EvaluationConfig(**params)


def create_avap(config: VennConfConfig, model: ScoringClassifier) -> AVAPClassifier:
    return AVAPClassifier(
        model,
        create_sampling_strategy(config.sampling),
        seed=config.seed,
        validator=create_validator(config.validation),
    )


def create_acp_classifier(config: VennConfConfig, ncm: NCMClassification) -> ACPClassifier:
    return ACPClassifier(
        ncm,
        create_sampling_strategy(config.sampling),
        create_pvalue_calculator(config.calibrator),
        seed=config.seed,
        validator=create_validator(config.validation),
    )


def create_acp_regressor(config: VennConfConfig, ncm: NCMRegression) -> ACPRegressor:
    return ACPRegressor(
        ncm,
        create_sampling_strategy(config.sampling),
        create_pvalue_calculator(config.calibrator),
        seed=config.seed,
        validator=create_validator(config.validation),
    )
