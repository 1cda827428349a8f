"""
Utility functions for entropy-driven splitting and SAMME boosting:
impurity measures, error vectors, model weights and weighted resampling.

References:
- Shannon, C. E. (1948). A mathematical theory of communication.
- Quinlan, J. R. (1986). Induction of decision trees (ID3).
- Zhu, J., Zou, H., Rosset, S., & Hastie, T. (2009). Multi-class AdaBoost (SAMME).
"""

import logging
from typing import Dict, Iterable

import numpy as np
from scipy.stats import entropy as shannon_entropy
from sklearn.metrics import accuracy_score

logger = logging.getLogger(__name__)


# ===========================
# Impurity
# ===========================

def calculate_occurrences(values: np.ndarray) -> Dict[int, int]:
    """Count integer values, keyed in order of first occurrence."""
    occurrences: Dict[int, int] = {}
    for value in np.asarray(values).ravel():
        key = int(value)
        occurrences[key] = occurrences.get(key, 0) + 1
    return occurrences


def label_entropy(labels: np.ndarray) -> float:
    """
    Shannon entropy (base 2) of a label distribution.

    H = -Σ_c p_c log2(p_c), with p_c = count_c / N over the observed labels.
    An empty label vector has entropy 0.
    """
    labels = np.asarray(labels)
    if labels.size == 0:
        return 0.0
    _, counts = np.unique(labels, return_counts=True)
    return float(shannon_entropy(counts, base=2))


def entropy_from_counts(counts: np.ndarray) -> np.ndarray:
    """Base-2 entropy of every row of a (n_partitions, n_classes) count matrix."""
    return shannon_entropy(np.asarray(counts, dtype=float), base=2, axis=-1)


def weighted_entropy(subsets: Iterable) -> float:
    """
    Entropy of a partition: each subset's entropy weighted by its share of rows.

    Lower is better; a perfect separation scores 0.
    """
    subsets = list(subsets)
    total = sum(s.sample_count() for s in subsets)
    if total == 0:
        return 0.0
    return float(sum(s.sample_count() / total * s.entropy() for s in subsets))


def most_frequent(labels: np.ndarray):
    """Value of maximum occurrence; ties go to the lowest value."""
    values, counts = np.unique(np.asarray(labels), return_counts=True)
    return values[np.argmax(counts)]


# ===========================
# Boosting
# ===========================

def error_vector(predictions: np.ndarray, labels: np.ndarray) -> np.ndarray:
    """1.0 where the prediction is wrong, 0.0 where it matches."""
    predictions = np.asarray(predictions).ravel()
    labels = np.asarray(labels).ravel()
    return (predictions != labels).astype(float)


def weighted_error(weights: np.ndarray, errors: np.ndarray) -> float:
    """Weighted error rate (w · e) / Σw."""
    return float(np.dot(weights, errors) / np.sum(weights))


def samme_alpha(error: float, class_count: int, epsilon: float = 1e-3) -> float:
    """
    SAMME model weight: α = log((1 - err) / err) + log(K - 1).

    When err is exactly 0 or 1 the log-odds are infinite; α is then recomputed
    with ``epsilon`` added to numerator and denominator. The log(K - 1) term is
    taken as 0 when fewer than two classes are present.
    """
    error = np.float64(error)
    correction = np.log(max(class_count - 1, 1))
    with np.errstate(divide="ignore", invalid="ignore"):
        alpha = np.log((1 - error) / error) + correction
    if not np.isfinite(alpha):
        logger.warning(f"alpha is {alpha} for error={error:.6f}, stabilising with epsilon={epsilon}")
        alpha = np.log((1 - error + epsilon) / (error + epsilon)) + correction
    return float(alpha)


def generate_indices(
    weights: np.ndarray,
    n_samples: int,
    rng: np.random.Generator
) -> np.ndarray:
    """Draw row indices with replacement, using ``weights`` as the distribution."""
    return rng.choice(len(weights), size=n_samples, replace=True, p=weights)


# ===========================
# Metrics
# ===========================

def compute_accuracy(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """Fraction of matching labels."""
    return float(accuracy_score(np.asarray(y_true).ravel(), np.asarray(y_pred).ravel()))
