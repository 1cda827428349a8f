"""
Weak-learner contract and the scikit-learn adapter.

A learner is anything with ``fit(Dataset) -> Model``; a model is anything with
``predict(X) -> labels`` returning one label per row, in row order.
"""

import logging
from typing import TYPE_CHECKING, Protocol

import numpy as np
from sklearn.base import clone

if TYPE_CHECKING:
    from .dataset import Dataset

logger = logging.getLogger(__name__)


class Model(Protocol):
    def predict(self, X: np.ndarray) -> np.ndarray:
        ...


class Learner(Protocol):
    def fit(self, dataset: "Dataset") -> Model:
        ...


class SklearnLearner:
    """
    Use a scikit-learn classifier as a weak learner.

    Every call to ``fit`` trains a fresh clone of ``estimator``, so models
    returned by earlier rounds are never refitted.

    Example:
        >>> from sklearn.tree import DecisionTreeClassifier
        >>> learner = SklearnLearner(DecisionTreeClassifier(max_depth=1))
    """

    def __init__(self, estimator):
        self.estimator = estimator

    def fit(self, dataset: "Dataset"):
        model = clone(self.estimator)
        model.fit(dataset.features, dataset.labels)
        logger.debug(f"fitted {model} on {dataset.sample_count()} samples")
        return model

    def __repr__(self) -> str:
        return f"SklearnLearner({self.estimator!r})"
