"""
K-fold evaluation of learners on a Dataset.
"""

from dataclasses import dataclass, field
import logging
from typing import List, Optional

import numpy as np
from sklearn.model_selection import KFold

from .dataset import Dataset
from .learners import Learner
from .utils import compute_accuracy

logger = logging.getLogger(__name__)


@dataclass
class Report:
    """Per-fold accuracies of a k-fold run."""
    accuracies: np.ndarray
    fold_sizes: List[int] = field(default_factory=list)

    @property
    def mean_accuracy(self) -> float:
        return float(np.mean(self.accuracies))

    @property
    def std_accuracy(self) -> float:
        return float(np.std(self.accuracies))


def cross_validate(
    learner: Learner,
    dataset: Dataset,
    n_splits: int = 5,
    random_state: Optional[int] = 23
) -> Report:
    """
    Fit ``learner`` on k-1 folds and score accuracy on the held-out fold.

    Parameters
    ----------
    learner : Learner
        Anything with ``fit(Dataset) -> Model``.
    dataset : Dataset
        Data to partition.
    n_splits : int, default=5
        Number of folds.
    random_state : int or None, default=23
        Seed of the fold shuffle.

    Returns
    -------
    Report
        Accuracy of every fold.
    """
    kfold = KFold(n_splits=n_splits, shuffle=True, random_state=random_state)

    accuracies = []
    fold_sizes = []
    for fold, (train_indices, test_indices) in enumerate(kfold.split(dataset.features)):
        train = dataset.samples(train_indices)
        test = dataset.samples(test_indices)

        model = learner.fit(train)
        accuracy = compute_accuracy(test.labels, model.predict(test.features))
        logger.info(f"fold {fold + 1}/{n_splits}: accuracy={accuracy:.4f}")

        accuracies.append(accuracy)
        fold_sizes.append(len(test_indices))

    report = Report(accuracies=np.array(accuracies), fold_sizes=fold_sizes)
    logger.info(f"k-fold accuracies: {report.accuracies}, mean={report.mean_accuracy:.4f}")
    return report
