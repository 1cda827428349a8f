"""
Tabular dataset with typed attributes and entropy-driven partitioning.

A Dataset pairs a feature matrix X (n_samples, n_attributes) with a label
vector y (n_samples,) and tags every attribute as DISCRETE or CONTINUOUS.
The split operations are the primitives used for decision-tree induction:

- discrete attributes split into one child per observed integer value;
- continuous attributes split in two at a pivot chosen between adjacent
  distinct sorted values so that the weighted entropy of the children is
  minimal.

Children are grown row by row through a DatasetBuilder and never share
mutable state with their parent.
"""

from enum import IntEnum
import logging
from typing import Dict, List, Optional, Sequence, Tuple, Union

import numpy as np

from .exceptions import AttributeKindError, DataError, DegenerateSplitError, DimensionError
from .utils import entropy_from_counts, label_entropy

logger = logging.getLogger(__name__)


class AttributeType(IntEnum):
    """Kind of an attribute column."""
    DISCRETE = 0
    CONTINUOUS = 1


AttributeTypes = Union[int, AttributeType, Sequence[int], np.ndarray]

ContinuousSplit = Tuple[float, Tuple["Dataset", "Dataset"]]

# Marks the entropy cache as empty; 0.0 is a legitimate entropy.
_UNSET = object()


def _as_type_vector(attribute_types: AttributeTypes, n_attributes: int) -> np.ndarray:
    """Expand a single type to every column, or copy a per-column vector."""
    if np.isscalar(attribute_types):
        types = np.full(n_attributes, int(attribute_types), dtype=int)
    else:
        types = np.array(attribute_types, dtype=int).ravel()

    unknown = set(types.tolist()) - {t.value for t in AttributeType}
    if unknown:
        raise DataError(f"unknown attribute types: {sorted(unknown)}")
    return types


class Dataset:
    """
    Features, labels and per-attribute type tags.

    Invariants: X.shape[0] == len(y) and X.shape[1] == len(attribute_types).
    An empty dataset keeps its column count, so children of a split always
    have the parent's shape.

    Parameters
    ----------
    X : array-like, shape (n_samples, n_attributes)
        Feature matrix.
    y : array-like, shape (n_samples,)
        Class labels (small integers, or ±1 for binary boosting).
    attribute_types : AttributeType or sequence of AttributeType
        One tag per column, or a single tag applied to every column.
    name : str, optional
        Label used in ``repr``.

    Raises
    ------
    DimensionError
        If the shapes of X, y and attribute_types disagree.
    """

    def __init__(
        self,
        X: np.ndarray,
        y: np.ndarray,
        attribute_types: AttributeTypes,
        name: Optional[str] = None
    ):
        X = np.asarray(X, dtype=float)
        y = np.asarray(y).ravel()
        if X.ndim != 2:
            raise DimensionError(f"X must be 2-dimensional, got shape {X.shape}")

        types = _as_type_vector(attribute_types, X.shape[1])
        if X.shape[1] != len(types):
            logger.error(
                f"length mismatch: attributes: {X.shape[1]}, attribute types: {len(types)}"
            )
            raise DimensionError("attribute type vector length must match attribute count")
        if X.shape[0] != len(y):
            logger.error(f"length mismatch: rows: {X.shape[0]}, labels: {len(y)}")
            raise DimensionError("X row count and y length must match")

        self._X = X
        self._y = y
        self._attribute_types = types
        self._entropy = _UNSET
        self.name = name

    @classmethod
    def from_array(cls, data: np.ndarray, attribute_types: AttributeTypes, name: Optional[str] = None) -> "Dataset":
        """Build a dataset from a matrix whose last column holds the labels."""
        data = np.asarray(data, dtype=float)
        if data.ndim != 2 or data.shape[1] < 1:
            raise DimensionError(f"data must be 2-dimensional with a label column, got shape {data.shape}")
        return cls(data[:, :-1], data[:, -1], attribute_types, name=name)

    @classmethod
    def empty(cls, attribute_types: Sequence[int], name: Optional[str] = None) -> "Dataset":
        """A dataset with zero rows and one column per attribute type."""
        types = _as_type_vector(attribute_types, 0)
        return cls(np.empty((0, len(types))), np.empty(0), types, name=name)

    # ------------------------------------------------------------------
    # Shape and access
    # ------------------------------------------------------------------

    def sample_count(self) -> int:
        return self._X.shape[0]

    def attribute_count(self) -> int:
        return self._X.shape[1]

    def attribute_type(self, j: int) -> AttributeType:
        return AttributeType(int(self._attribute_types[j]))

    @property
    def features(self) -> np.ndarray:
        return self._X

    @property
    def labels(self) -> np.ndarray:
        return self._y

    @property
    def attribute_types(self) -> np.ndarray:
        return self._attribute_types.copy()

    def attribute(self, j: int) -> np.ndarray:
        """Copy of column j."""
        return self._X[:, j].copy()

    def classes(self) -> np.ndarray:
        """Copy of the label vector."""
        return self._y.copy()

    def class_value(self, i: int) -> int:
        return int(self._y[i])

    def sample(self, i: int) -> np.ndarray:
        """Row i with its label appended as the last element."""
        return np.append(self._X[i], self._y[i])

    def samples(self, indices: Sequence[int]) -> "Dataset":
        """New dataset made of the given rows; repeats allowed, order kept."""
        indices = np.asarray(indices, dtype=int)
        return Dataset(self._X[indices], self._y[indices], self._attribute_types.copy())

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add_sample(self, sample: Sequence[float]) -> None:
        """Append a row given as feature values followed by the label."""
        sample = np.asarray(sample, dtype=float).ravel()
        if len(sample) != self.attribute_count() + 1:
            raise DimensionError(
                f"sample must have {self.attribute_count() + 1} values "
                f"(attributes + label), got {len(sample)}"
            )
        logger.debug(f"adding sample {sample} to {self!r}")
        self._y = np.append(self._y, sample[-1])
        self._X = np.vstack([self._X, sample[:-1]])
        self._entropy = _UNSET

    def replace_labels(self, labels: Sequence[float]) -> None:
        """Replace the whole label vector; the entropy cache is invalidated."""
        labels = np.asarray(labels).ravel()
        if len(labels) != self.sample_count():
            raise DimensionError(
                f"expected {self.sample_count()} labels, got {len(labels)}"
            )
        self._y = labels
        self._entropy = _UNSET

    def drop_attribute(self, attribute: int) -> None:
        """Remove a column and its type tag together."""
        X = np.delete(self._X, attribute, axis=1)
        types = np.delete(self._attribute_types, attribute)
        self._X, self._attribute_types = X, types

    # ------------------------------------------------------------------
    # Impurity
    # ------------------------------------------------------------------

    def entropy(self) -> float:
        """Shannon entropy (bits) of the labels, cached until labels change."""
        if self._entropy is _UNSET:
            self._entropy = label_entropy(self._y)
            logger.debug(f"entropy of {self!r}: {self._entropy:.6f}")
        return self._entropy

    # ------------------------------------------------------------------
    # Partitioning
    # ------------------------------------------------------------------

    def _require_kind(self, attribute: int, kind: AttributeType, operation: str) -> None:
        if self.attribute_type(attribute) != kind:
            raise AttributeKindError(
                f"{operation} needs a {kind.name.lower()} attribute, "
                f"attribute {attribute} is {self.attribute_type(attribute).name.lower()}"
            )

    def _partition(self, keys: np.ndarray) -> Dict[int, "Dataset"]:
        builders: Dict[int, DatasetBuilder] = {}
        for i, key in enumerate(keys):
            key = int(key)
            if key not in builders:
                logger.debug(f"adding new split based on value {key}")
                builders[key] = DatasetBuilder(self._attribute_types)
            builders[key].add_sample(self.sample(i))
        return {key: builder.build() for key, builder in builders.items()}

    def split_by_class(self) -> Dict[int, "Dataset"]:
        """One child per label value, in order of first occurrence."""
        return self._partition(self._y)

    def split_by_discrete_attribute(self, attribute: int) -> Dict[int, "Dataset"]:
        """
        One child per integer value of a discrete attribute.

        Keys follow the order in which values first occur; callers must not
        rely on them being sorted.
        """
        self._require_kind(attribute, AttributeType.DISCRETE, "split_by_discrete_attribute")
        return self._partition(self._X[:, attribute])

    def split_by_continuous_attribute(self, attribute: int) -> Optional[ContinuousSplit]:
        """
        Best binary split of a continuous attribute.

        Candidate pivots are midpoints between adjacent distinct sorted values.
        The pivot whose children have the lowest weighted entropy wins; on ties
        the lowest pivot is kept.

        Returns
        -------
        (pivot, (under, over)) or None
            None when fewer than two distinct values are present.
        """
        self._require_kind(attribute, AttributeType.CONTINUOUS, "split_by_continuous_attribute")

        n_samples = self.sample_count()
        order = np.argsort(self._X[:, attribute], kind="stable")
        values = self._X[order, attribute]
        logger.debug(f"splitting {self!r} on attribute {attribute}")

        # no pivot exists between equal neighbours
        candidates = np.flatnonzero(values[:-1] != values[1:])
        if len(candidates) == 0:
            return None

        # class counts below each candidate, read off the sorted labels
        _, codes = np.unique(self._y[order], return_inverse=True)
        one_hot = np.zeros((n_samples, codes.max() + 1))
        one_hot[np.arange(n_samples), codes.ravel()] = 1
        under_counts = np.cumsum(one_hot, axis=0)[candidates]
        over_counts = one_hot.sum(axis=0) - under_counts

        n_under = candidates + 1.0
        n_over = n_samples - n_under
        scores = (
            n_under / n_samples * entropy_from_counts(under_counts)
            + n_over / n_samples * entropy_from_counts(over_counts)
        )

        # argmin keeps the first minimum, i.e. the lowest pivot
        best = candidates[np.argmin(scores)]
        pivot = float((values[best] + values[best + 1]) / 2)
        logger.debug(f"best pivot {pivot} with weighted entropy {scores.min():.6f}")
        return pivot, self.split_at(attribute, pivot)

    def split_at(self, attribute: int, pivot: float) -> Tuple["Dataset", "Dataset"]:
        """
        Split rows of a continuous attribute into (under, over) at ``pivot``.

        Raises
        ------
        DegenerateSplitError
            If a row's value is not strictly below or above the pivot.
        """
        self._require_kind(attribute, AttributeType.CONTINUOUS, "split_at")

        under = DatasetBuilder(self._attribute_types)
        over = DatasetBuilder(self._attribute_types)
        for i, value in enumerate(self._X[:, attribute]):
            if value < pivot:
                under.add_sample(self.sample(i))
            elif value > pivot:
                over.add_sample(self.sample(i))
            else:
                raise DegenerateSplitError(
                    f"value {value} of row {i} does not separate from pivot {pivot}"
                )

        return under.build(), over.build()

    # ------------------------------------------------------------------

    def describe(self) -> str:
        """One ``row -> label`` line per sample."""
        lines = [f"{self._X[i]} -> {self._y[i]}" for i in range(self.sample_count())]
        return "\n" + "\n".join(lines) + "\n"

    def __repr__(self) -> str:
        return f"{self.name}[{self.sample_count()} x {self.attribute_count()}]"


class DatasetBuilder:
    """
    Row accumulator that is finalized into a Dataset.

    Rows are given as feature values followed by the label, like
    ``Dataset.sample`` returns them.
    """

    def __init__(self, attribute_types: Sequence[int]):
        self._attribute_types = np.array(attribute_types, dtype=int).ravel()
        self._rows: List[np.ndarray] = []
        self._labels: List[float] = []

    def __len__(self) -> int:
        return len(self._rows)

    def add_sample(self, sample: Sequence[float]) -> None:
        sample = np.asarray(sample, dtype=float).ravel()
        if len(sample) != len(self._attribute_types) + 1:
            raise DimensionError(
                f"sample must have {len(self._attribute_types) + 1} values "
                f"(attributes + label), got {len(sample)}"
            )
        self._rows.append(sample[:-1])
        self._labels.append(sample[-1])

    def build(self, name: Optional[str] = None) -> Dataset:
        n_attributes = len(self._attribute_types)
        if self._rows:
            X = np.vstack(self._rows)
        else:
            X = np.empty((0, n_attributes))
        return Dataset(X, np.array(self._labels, dtype=float), self._attribute_types.copy(), name=name)
