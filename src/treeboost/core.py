"""
Core boosting implementation.

Implements multi-class AdaBoost in its SAMME form: every round resamples the
training set according to the current sample weights, fits a weak learner on
the resample, scores it on the full training set and reweights the samples it
got wrong. The final model is a weighted vote of all rounds.

References:
- Freund, Y., & Schapire, R. E. (1997). A decision-theoretic generalization of
  on-line learning and an application to boosting. JCSS, 55(1), 119-139.
- Zhu, J., Zou, H., Rosset, S., & Hastie, T. (2009). Multi-class AdaBoost.
  Statistics and Its Interface, 2(3), 349-360.
"""

from typing import List, Optional, Sequence, Tuple
import logging
import numpy as np

from .dataset import Dataset
from .exceptions import DataError
from .learners import Learner, Model
from .utils import (
    error_vector, weighted_error, samme_alpha, generate_indices, compute_accuracy
)


class AdaBoostModel:
    """
    Weighted vote over the weak models of a fitted AdaBoost run.

    Each row is assigned the class with the largest summed alpha among the
    models voting for it; ties go to the lowest class label.
    """

    def __init__(
        self,
        estimators: Sequence[Model],
        alphas: Sequence[float],
        classes: np.ndarray,
        errors: Optional[Sequence[float]] = None
    ):
        if len(estimators) != len(alphas):
            raise ValueError(
                f"got {len(estimators)} estimators but {len(alphas)} alphas"
            )
        self._estimators: Tuple[Model, ...] = tuple(estimators)
        self._alphas = np.array(alphas, dtype=float)
        self._classes = np.unique(np.asarray(classes))
        self._errors = np.array(errors if errors is not None else [], dtype=float)

    @property
    def estimators(self) -> Tuple[Model, ...]:
        return self._estimators

    @property
    def alphas(self) -> np.ndarray:
        return self._alphas.copy()

    @property
    def classes(self) -> np.ndarray:
        """Distinct labels seen while fitting, ascending."""
        return self._classes.copy()

    @property
    def errors(self) -> np.ndarray:
        """Weighted training error of every round."""
        return self._errors.copy()

    def __len__(self) -> int:
        return len(self._estimators)

    def decision_function(self, X: np.ndarray, up_to_iteration: Optional[int] = None) -> np.ndarray:
        """
        Summed alpha per class.

        Args:
            X: Features, shape (n_samples, n_attributes).
            up_to_iteration: Use only the first k models (for staged predictions).

        Returns:
            Votes, shape (n_samples, n_classes), columns ordered as ``classes``.
        """
        n_estimators = up_to_iteration if up_to_iteration is not None else len(self._estimators)
        X = np.asarray(X, dtype=float)

        votes = np.zeros((X.shape[0], len(self._classes)))
        for model, alpha in zip(self._estimators[:n_estimators], self._alphas[:n_estimators]):
            predictions = np.asarray(model.predict(X)).ravel()
            votes += alpha * (predictions[:, None] == self._classes[None, :])
        return votes

    def predict(self, X: np.ndarray, up_to_iteration: Optional[int] = None) -> np.ndarray:
        """
        Predict class labels.

        Args:
            X: Features, shape (n_samples, n_attributes).
            up_to_iteration: Use only the first k models.

        Returns:
            Predicted labels, shape (n_samples,).
        """
        votes = self.decision_function(X, up_to_iteration=up_to_iteration)
        # argmax keeps the first maximum, i.e. the lowest label
        return self._classes[np.argmax(votes, axis=1)]

    def accuracy(self, X: np.ndarray, y: np.ndarray) -> float:
        return compute_accuracy(y, self.predict(X))


class AdaBoost:
    """
    SAMME AdaBoost over an arbitrary weak learner.

    Per-sample weights reach the weak learner only through weighted
    resampling, so any learner satisfying ``fit(Dataset) -> Model`` works.
    Round m:
      1. Draw ``sample_proportion * N`` rows with replacement, p = w.
      2. Fit the learner on the resample.
      3. err_m = Σ w_i I(y_i ≠ G_m(x_i)) / Σ w_i over the full dataset.
      4. α_m = log((1 - err_m) / err_m) + log(K - 1).
      5. w_i ← w_i exp(α_m I(y_i ≠ G_m(x_i))), then renormalise.

    Every round's model is kept, whatever its alpha. AdaBoost itself
    satisfies the learner contract, so ensembles can be nested.
    """

    def __init__(
        self,
        learner: Learner,
        n_estimators: int = 50,
        sample_proportion: float = 1.0,
        epsilon: float = 1e-3,
        random_state: Optional[int] = None,
        verbose: bool = False
    ):
        """
        Args:
            learner: Weak learner, ``fit(Dataset) -> Model``.
            n_estimators: Number of boosting rounds (M).
            sample_proportion: Fraction of the dataset drawn per round.
            epsilon: Stabiliser for the log-odds when a round's error is 0 or 1.
            random_state: Random seed for reproducibility.
            verbose: Enable logging output.
        """
        if n_estimators < 1:
            raise ValueError(f"n_estimators must be at least 1, got {n_estimators}")
        if sample_proportion <= 0:
            raise ValueError(f"sample_proportion must be positive, got {sample_proportion}")
        if epsilon <= 0:
            raise ValueError(f"epsilon must be positive, got {epsilon}")

        self.learner = learner
        self.n_estimators = n_estimators
        self.sample_proportion = sample_proportion
        self.epsilon = epsilon
        self.random_state = random_state
        self.verbose = verbose

        # Sample weights after every round of the last fit
        self.weight_history_: List[np.ndarray] = []

        # Setup logging
        self.logger = logging.getLogger(__name__)
        if self.verbose:
            logging.basicConfig(level=logging.INFO)

    def fit(self, dataset: Dataset) -> AdaBoostModel:
        """
        Boost the weak learner on ``dataset``.

        Args:
            dataset: Training data.

        Returns:
            Fitted AdaBoostModel.

        Raises:
            DataError: If the dataset is empty or the proportion yields no samples.
        """
        rng = np.random.default_rng(self.random_state)
        n_samples = dataset.sample_count()
        if n_samples == 0:
            raise DataError("cannot boost on an empty dataset: length of weights cannot be 0")

        n_resample = int(n_samples * self.sample_proportion)
        if n_resample == 0:
            raise DataError(
                f"sample_proportion={self.sample_proportion} draws no samples "
                f"from {n_samples} rows"
            )
        self.logger.debug(f"number of samples for each training iteration: {n_resample}")

        weights = np.full(n_samples, 1.0 / n_samples)
        X = dataset.features
        y = dataset.labels
        class_count = len(np.unique(y))
        self.logger.debug(f"there are {class_count} unique classes")

        self.weight_history_ = []
        estimators: List[Model] = []
        alphas: List[float] = []
        errors: List[float] = []

        for m in range(self.n_estimators):
            self.logger.debug(f"starting iteration {m + 1}")

            indices = generate_indices(weights, n_resample, rng)
            model = self.learner.fit(dataset.samples(indices))

            err = error_vector(model.predict(X), y)
            error = weighted_error(weights, err)
            alpha = samme_alpha(error, class_count, self.epsilon)

            if alpha < 1.0 / class_count:
                self.logger.debug(
                    f"iteration {m + 1}: alpha={alpha:.6f} below {1.0 / class_count:.6f}, kept anyway"
                )

            weights = weights * np.exp(alpha * err)
            weights = weights / weights.sum()
            self.weight_history_.append(weights.copy())

            self.logger.debug(f"error: {error:.6f}, alpha: {alpha:.6f}")
            self.logger.debug(f"weights: {weights[:5]}")

            estimators.append(model)
            alphas.append(alpha)
            errors.append(error)

            if self.verbose and (m + 1) % 10 == 0:
                self.logger.info(
                    f"Iteration {m+1}/{self.n_estimators}: error={error:.6f}, alpha={alpha:.6f}"
                )

        return AdaBoostModel(estimators, alphas, y, errors=errors)

    def __repr__(self) -> str:
        return (
            f"AdaBoost(n_estimators={self.n_estimators}, "
            f"sample_proportion={self.sample_proportion}) with {self.learner!r}"
        )
