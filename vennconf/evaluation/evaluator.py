"""Hold-out evaluation of aggregated conformal and Venn-ABERS predictors."""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import numpy as np
from pydantic import BaseModel, Field
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table
from sklearn.model_selection import train_test_split

from ..conformal.acp import ACPClassifier
from ..data.dataset import Dataset
from ..venn_abers.avap import AVAPClassifier
from .metrics import CPAccuracy, VAPCalibration, VAPIntervalWidth

logger = logging.getLogger(__name__)


class EvaluationConfig(BaseModel):
    """Configuration for hold-out evaluation."""
    test_ratio: float = Field(0.25, gt=0, lt=1, description="Share of records held out for testing")
    seed: int = Field(42, ge=0, description="Seed of the train/test split")
    confidence_levels: List[float] = Field([0.8, 0.9, 0.95], description="Evaluated confidences")
    calibration_bins: int = Field(10, ge=5, le=100, description="Bins of the calibration curve")
    show_progress: bool = Field(False, description="Show a progress bar while predicting")


class EvaluationResult(BaseModel):
    """Metrics of one evaluated predictor."""
    predictor: str
    evaluation_timestamp: str
    num_train: int
    num_test: int
    accuracy: Dict[str, float] = Field(default_factory=dict)
    calibration: List[Dict[str, float]] = Field(default_factory=list)
    calibration_error: Optional[float] = None
    interval_width: Dict[str, float] = Field(default_factory=dict)
    num_degenerate: int = 0


class PredictorEvaluator:
    """Trains a predictor on part of a dataset and evaluates it on the rest."""

    def __init__(self, config: Optional[EvaluationConfig] = None, console: Optional[Console] = None):
        self.config = config or EvaluationConfig()
        self.console = console or Console()

    def split(self, dataset: Dataset) -> Tuple[Dataset, Dataset]:
        indices = np.arange(len(dataset))
        train_idx, test_idx = train_test_split(
            indices, test_size=self.config.test_ratio, random_state=self.config.seed
        )
        return dataset.subset(train_idx), dataset.subset(test_idx)

    def evaluate_avap(self, avap: AVAPClassifier, dataset: Dataset) -> EvaluationResult:
        train_set, test_set = self.split(dataset)
        avap.train(train_set)

        calibration = VAPCalibration(self.config.calibration_bins)
        widths = VAPIntervalWidth()
        num_degenerate = 0
        for features, label in self._iterate(test_set, "Evaluating AVAP..."):
            prediction = avap.predict(features)
            if prediction.is_degenerate:
                num_degenerate += 1
            calibration.add_prediction(prediction, label)
            widths.add_prediction(prediction)

        results = calibration.get_results()
        result = EvaluationResult(
            predictor="AVAP",
            evaluation_timestamp=datetime.now().isoformat(),
            num_train=len(train_set),
            num_test=len(test_set),
            calibration=results.to_dict(orient="records"),
            calibration_error=calibration.calibration_error() if not results.empty else None,
            interval_width={k: float(v) for k, v in widths.get_results().items()},
            num_degenerate=num_degenerate,
        )
        logger.info(f"✅ AVAP evaluated on {len(test_set)} test records")
        return result

    def evaluate_acp(self, acp: ACPClassifier, dataset: Dataset) -> EvaluationResult:
        train_set, test_set = self.split(dataset)
        acp.train(train_set)

        accuracy = CPAccuracy(self.config.confidence_levels)
        for features, label in self._iterate(test_set, "Evaluating ACP..."):
            accuracy.add_prediction(acp.predict(features), label)

        result = EvaluationResult(
            predictor="ACP",
            evaluation_timestamp=datetime.now().isoformat(),
            num_train=len(train_set),
            num_test=len(test_set),
            accuracy={str(c): acc for c, acc in accuracy.get_results().items()},
        )
        logger.info(f"✅ ACP evaluated on {len(test_set)} test records")
        return result

    def _iterate(self, test_set: Dataset, description: str):
        records = [(f, l.item() if hasattr(l, "item") else l)
                   for f, l in zip(test_set.features, test_set.labels)]
        if not self.config.show_progress:
            yield from records
            return
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            TimeElapsedColumn(),
            console=self.console
        ) as progress:
            task = progress.add_task(description, total=len(records))
            for record in records:
                yield record
                progress.advance(task)

    def display_results(self, result: EvaluationResult) -> None:
        table = Table(title=f"📊 {result.predictor} evaluation ({result.num_test} test records)")
        table.add_column("Metric", style="cyan")
        table.add_column("Value", justify="right", style="green")

        for confidence, acc in result.accuracy.items():
            table.add_row(f"Accuracy @ {confidence}", f"{acc:.3f}")
        for name, value in result.interval_width.items():
            table.add_row(name, f"{value:.4f}")
        if result.calibration_error is not None:
            table.add_row("Calibration error", f"{result.calibration_error:.4f}")
        if result.num_degenerate:
            table.add_row("Degenerate predictions", str(result.num_degenerate))

        self.console.print(table)

    def save_results(self, result: EvaluationResult,
                     output_path: Union[str, Path] = "artifacts/evaluation.json") -> Path:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, 'w') as f:
            json.dump(result.model_dump(), f, indent=2)
        self.console.print(f"💾 Results saved to {output_path}")
        return output_path
