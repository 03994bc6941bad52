"""Calibration plots for Venn-ABERS predictions."""

import logging
from pathlib import Path
from typing import Optional, Union

import matplotlib.pyplot as plt
import pandas as pd

logger = logging.getLogger(__name__)


def plot_calibration_curve(results: pd.DataFrame, save_path: Optional[Union[str, Path]] = None,
                           title: str = "Venn-ABERS Calibration"):
    """Reliability diagram from ``VAPCalibration.get_results()``."""
    required = {"expected", "observed", "count"}
    missing = required - set(results.columns)
    if missing:
        raise ValueError(f"Calibration results are missing columns: {sorted(missing)}")

    fig, ax = plt.subplots(figsize=(8, 8))
    ax.plot([0, 1], [0, 1], 'k--', alpha=0.6, label='Perfect calibration')
    if not results.empty:
        ax.plot(results["expected"], results["observed"], 'o-', linewidth=2, label='Observed')
        for _, row in results.iterrows():
            ax.annotate(str(int(row["count"])), (row["expected"], row["observed"]),
                        textcoords="offset points", xytext=(0, 6), ha='center', fontsize=8)
    ax.set_xlim(0, 1)
    ax.set_ylim(0, 1)
    ax.set_xlabel('Predicted probability')
    ax.set_ylabel('Observed accuracy')
    ax.set_title(title)
    ax.legend()
    ax.grid(True, alpha=0.3)
    fig.tight_layout()

    if save_path:
        save_path = Path(save_path)
        save_path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(save_path, dpi=150, bbox_inches='tight')
        logger.info(f"✅ Calibration plot saved to {save_path}")

    return fig
