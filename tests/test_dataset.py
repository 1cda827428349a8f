"""
Unit tests for the Dataset abstraction.

Tests correctness of:
- Construction and shape validation
- Sample access and row-by-row accumulation
- Discrete, continuous and per-class partitioning
- Entropy and its cache
- Attribute removal
"""

import numpy as np
import pytest

import sys
from pathlib import Path

# Add src directory to path
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from treeboost.dataset import AttributeType, Dataset, DatasetBuilder
from treeboost.exceptions import (
    AttributeKindError, DataError, DegenerateSplitError, DimensionError
)
from treeboost.utils import weighted_entropy

D = AttributeType.DISCRETE
C = AttributeType.CONTINUOUS


def rows_of(dataset):
    """Rows (features + label) as a sorted list of tuples."""
    return sorted(tuple(dataset.sample(i)) for i in range(dataset.sample_count()))


@pytest.fixture
def mixed_dataset():
    X = np.array([
        [0, 1.5],
        [1, 2.5],
        [0, 3.5],
        [2, 4.5],
        [1, 0.5],
    ])
    y = np.array([0, 1, 1, 0, 1])
    return Dataset(X, y, [D, C])


# =========================
# Construction
# =========================

def test_construction_shapes():
    ds = Dataset(np.zeros((3, 2)), np.zeros(3), [D, C])

    assert ds.sample_count() == 3
    assert ds.attribute_count() == 2
    assert ds.attribute_type(0) == D
    assert ds.attribute_type(1) == C


def test_single_type_applies_to_every_column():
    ds = Dataset(np.zeros((2, 3)), np.zeros(2), C)

    np.testing.assert_array_equal(ds.attribute_types, [C, C, C])


def test_type_length_mismatch_raises():
    with pytest.raises(DimensionError):
        Dataset(np.zeros((3, 2)), np.zeros(3), [D])


def test_label_length_mismatch_raises():
    with pytest.raises(DimensionError):
        Dataset(np.zeros((3, 2)), np.zeros(4), [D, D])


def test_unknown_attribute_type_raises():
    with pytest.raises(DataError):
        Dataset(np.zeros((1, 1)), np.zeros(1), [5])


def test_from_array_uses_last_column_as_labels():
    data = np.array([[1.0, 2.0, 0], [3.0, 4.0, 1]])
    ds = Dataset.from_array(data, C)

    np.testing.assert_array_equal(ds.features, [[1.0, 2.0], [3.0, 4.0]])
    np.testing.assert_array_equal(ds.labels, [0, 1])


def test_empty_dataset_keeps_column_count():
    ds = Dataset.empty([D, C, C])

    assert ds.sample_count() == 0
    assert ds.attribute_count() == 3
    assert ds.features.shape == (0, 3)


def test_repr_uses_name():
    ds = Dataset(np.zeros((4, 2)), np.zeros(4), C, name="toy")

    assert repr(ds) == "toy[4 x 2]"


# =========================
# Samples
# =========================

def test_sample_appends_label(mixed_dataset):
    for i in range(mixed_dataset.sample_count()):
        expected = np.append(mixed_dataset.features[i], mixed_dataset.labels[i])
        np.testing.assert_array_equal(mixed_dataset.sample(i), expected)


def test_add_sample_round_trip(mixed_dataset):
    rebuilt = Dataset.empty(mixed_dataset.attribute_types)
    for i in range(mixed_dataset.sample_count()):
        rebuilt.add_sample(mixed_dataset.sample(i))

    np.testing.assert_array_equal(rebuilt.features, mixed_dataset.features)
    np.testing.assert_array_equal(rebuilt.labels, mixed_dataset.labels)


def test_add_sample_wrong_length_raises(mixed_dataset):
    with pytest.raises(DimensionError):
        mixed_dataset.add_sample([1.0, 2.0])


def test_samples_selects_rows_with_repeats(mixed_dataset):
    subset = mixed_dataset.samples([3, 3, 0])

    np.testing.assert_array_equal(subset.labels, [0, 0, 0])
    np.testing.assert_array_equal(subset.features[0], mixed_dataset.features[3])
    np.testing.assert_array_equal(subset.features[2], mixed_dataset.features[0])


def test_accessors_return_copies(mixed_dataset):
    mixed_dataset.attribute(1)[0] = 99.0
    mixed_dataset.classes()[0] = 99
    mixed_dataset.attribute_types[0] = C

    assert mixed_dataset.features[0, 1] == 1.5
    assert mixed_dataset.class_value(0) == 0
    assert mixed_dataset.attribute_type(0) == D


def test_builder_builds_empty_with_shape():
    ds = DatasetBuilder([C, C]).build()

    assert ds.features.shape == (0, 2)
    assert ds.sample_count() == 0


# =========================
# Discrete and class splits
# =========================

def test_split_by_discrete_attribute_partitions(mixed_dataset):
    subsets = mixed_dataset.split_by_discrete_attribute(0)

    # first-occurrence order
    assert list(subsets.keys()) == [0, 1, 2]
    assert sum(s.sample_count() for s in subsets.values()) == mixed_dataset.sample_count()

    merged = []
    for value, subset in subsets.items():
        np.testing.assert_array_equal(subset.attribute(0), np.full(subset.sample_count(), value))
        merged.extend(rows_of(subset))
    assert sorted(merged) == rows_of(mixed_dataset)


def test_split_by_discrete_on_continuous_raises(mixed_dataset):
    with pytest.raises(AttributeKindError):
        mixed_dataset.split_by_discrete_attribute(1)


def test_split_children_do_not_alias_types(mixed_dataset):
    subsets = mixed_dataset.split_by_discrete_attribute(0)
    subsets[0].drop_attribute(0)

    assert mixed_dataset.attribute_count() == 2
    assert mixed_dataset.attribute_type(0) == D
    assert subsets[1].attribute_count() == 2


def test_split_by_class(mixed_dataset):
    subsets = mixed_dataset.split_by_class()

    assert list(subsets.keys()) == [0, 1]
    assert subsets[0].sample_count() == 2
    assert subsets[1].sample_count() == 3
    for label, subset in subsets.items():
        assert np.all(subset.labels == label)
        np.testing.assert_array_equal(subset.attribute_types, mixed_dataset.attribute_types)


# =========================
# Continuous splits
# =========================

def test_split_by_continuous_perfect_separation():
    ds = Dataset(np.array([[1.0], [2.0], [3.0], [4.0]]), np.array([0, 0, 1, 1]), C)

    pivot, (under, over) = ds.split_by_continuous_attribute(0)

    assert pivot == 2.5
    assert weighted_entropy((under, over)) == 0.0
    np.testing.assert_array_equal(under.attribute(0), [1.0, 2.0])
    np.testing.assert_array_equal(over.attribute(0), [3.0, 4.0])


def test_split_by_continuous_does_not_mutate():
    X = np.array([[3.0], [1.0], [4.0], [2.0]])
    ds = Dataset(X.copy(), np.array([1, 0, 1, 0]), C)

    ds.split_by_continuous_attribute(0)

    np.testing.assert_array_equal(ds.features, X)


def test_pivot_never_equals_observed_value():
    values = np.array([1.0, 1.0, 2.0, 2.0, 3.0, 5.0])
    ds = Dataset(values.reshape(-1, 1), np.array([0, 1, 0, 1, 1, 0]), C)

    pivot, (under, over) = ds.split_by_continuous_attribute(0)

    assert pivot not in values
    assert under.sample_count() + over.sample_count() == len(values)


def test_pivot_tie_keeps_lowest_candidate():
    # 1.5 and 3.5 both score 0.75 * H(1/3, 2/3)
    ds = Dataset(np.array([[1.0], [2.0], [3.0], [4.0]]), np.array([0, 1, 0, 1]), C)

    pivot, _ = ds.split_by_continuous_attribute(0)

    assert pivot == 1.5


def test_no_valid_pivot_returns_none():
    ds = Dataset(np.array([[2.0], [2.0], [2.0]]), np.array([0, 1, 0]), C)

    assert ds.split_by_continuous_attribute(0) is None


def test_split_by_continuous_on_discrete_raises(mixed_dataset):
    with pytest.raises(AttributeKindError):
        mixed_dataset.split_by_continuous_attribute(0)


def test_split_at(mixed_dataset):
    under, over = mixed_dataset.split_at(1, 2.0)

    np.testing.assert_array_equal(under.attribute(1), [1.5, 0.5])
    np.testing.assert_array_equal(over.attribute(1), [2.5, 3.5, 4.5])
    np.testing.assert_array_equal(under.attribute_types, mixed_dataset.attribute_types)


def test_split_at_exact_value_raises(mixed_dataset):
    with pytest.raises(DegenerateSplitError):
        mixed_dataset.split_at(1, 2.5)


def test_split_at_on_discrete_raises(mixed_dataset):
    with pytest.raises(AttributeKindError):
        mixed_dataset.split_at(0, 0.5)


# =========================
# Entropy
# =========================

def test_entropy_single_class_is_zero():
    ds = Dataset(np.zeros((4, 1)), np.ones(4), C)

    assert ds.entropy() == 0.0
    assert ds.entropy() == 0.0


def test_entropy_balanced_two_classes_is_one_bit():
    ds = Dataset(np.zeros((4, 1)), np.array([0, 1, 0, 1]), C)

    assert ds.entropy() == pytest.approx(1.0, abs=1e-12)


def test_entropy_three_classes():
    ds = Dataset(np.zeros((3, 1)), np.array([0, 1, 2]), C)

    assert ds.entropy() == pytest.approx(np.log2(3))


def test_entropy_empty_is_zero():
    assert Dataset.empty([C]).entropy() == 0.0


def test_replace_labels_invalidates_entropy():
    ds = Dataset(np.zeros((4, 1)), np.array([0, 1, 0, 1]), C)
    assert ds.entropy() == pytest.approx(1.0)

    ds.replace_labels([1, 1, 1, 1])

    assert ds.entropy() == 0.0


def test_add_sample_invalidates_entropy():
    ds = Dataset(np.zeros((2, 1)), np.array([1, 1]), C)
    assert ds.entropy() == 0.0

    ds.add_sample([0.0, 0])
    ds.add_sample([0.0, 0])

    assert ds.entropy() == pytest.approx(1.0)


def test_replace_labels_wrong_length_raises(mixed_dataset):
    with pytest.raises(DimensionError):
        mixed_dataset.replace_labels([0, 1])


# =========================
# Attribute removal
# =========================

def test_drop_attribute_shifts_columns():
    X = np.array([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]])
    ds = Dataset(X, np.array([0, 1]), [D, C, D])

    ds.drop_attribute(1)

    assert ds.attribute_count() == 2
    np.testing.assert_array_equal(ds.attribute(0), [1.0, 4.0])
    np.testing.assert_array_equal(ds.attribute(1), [3.0, 6.0])
    np.testing.assert_array_equal(ds.attribute_types, [D, D])


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
