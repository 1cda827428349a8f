"""
ID3 decision tree built on the Dataset split primitives.

Each node is split on the attribute whose partition has the lowest weighted
entropy: discrete attributes branch once per observed value, continuous
attributes branch in two at their best pivot. With ``max_depth=1`` the tree
is a decision stump, the usual weak learner for AdaBoost.

Reference: Quinlan, J. R. (1986). Induction of decision trees.
Machine Learning, 1(1), 81-106.
"""

import logging
from typing import Dict, Optional, Tuple

import numpy as np

from .dataset import AttributeType, Dataset
from .exceptions import DataError
from .utils import most_frequent, weighted_entropy, compute_accuracy

logger = logging.getLogger(__name__)

# Branch keys of a continuous node
UNDER, OVER = 0, 1


class TreeNode:
    """
    Node of an ID3 tree.

    Attributes
    ----------
    attribute : int or None
        Column tested at this node (None for a leaf).
    kind : AttributeType or None
        Kind of the tested column.
    pivot : float or None
        Threshold of a continuous node.
    children : dict
        Discrete value -> node, or UNDER/OVER -> node for a continuous node.
    label : float
        Most frequent label among the node's samples; the leaf prediction and
        the fallback for discrete values never seen while fitting.
    n_samples : int
        Number of training samples reaching the node.
    entropy : float
        Label entropy of those samples.
    depth : int
        Depth of the node, the root being 0.
    """

    def __init__(self, depth: int = 0):
        self.attribute: Optional[int] = None
        self.kind: Optional[AttributeType] = None
        self.pivot: Optional[float] = None
        self.children: Dict[int, "TreeNode"] = {}
        self.label = None
        self.n_samples = 0
        self.entropy = 0.0
        self.depth = depth

    @property
    def is_leaf(self) -> bool:
        return self.attribute is None

    def predict_one(self, x: np.ndarray):
        node = self
        while not node.is_leaf:
            value = x[node.attribute]
            if node.kind == AttributeType.CONTINUOUS:
                node = node.children[UNDER] if value < node.pivot else node.children[OVER]
            else:
                child = node.children.get(int(value))
                if child is None:
                    return node.label
                node = child
        return node.label


class ID3Model:
    """Fitted ID3 tree."""

    def __init__(self, root: TreeNode):
        self.root = root

    def predict(self, X: np.ndarray) -> np.ndarray:
        X = np.asarray(X, dtype=float)
        return np.array([self.root.predict_one(x) for x in X])

    def accuracy(self, X: np.ndarray, y: np.ndarray) -> float:
        return compute_accuracy(y, self.predict(X))

    def depth(self) -> int:
        """Depth of the deepest leaf."""
        stack = [self.root]
        deepest = 0
        while stack:
            node = stack.pop()
            deepest = max(deepest, node.depth)
            stack.extend(node.children.values())
        return deepest


class ID3:
    """
    ID3 tree learner.

    Growth stops at a pure node, at ``max_depth``, or when no attribute
    partitions the node into at least two children.
    """

    def __init__(self, max_depth: Optional[int] = None):
        """
        Args:
            max_depth: Maximum depth of the tree, None for unbounded. 0 gives a
                single leaf predicting the majority label.
        """
        if max_depth is not None and max_depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {max_depth}")
        self.max_depth = max_depth

    def fit(self, dataset: Dataset) -> ID3Model:
        if dataset.sample_count() == 0:
            raise DataError("cannot grow a tree from an empty dataset")
        return ID3Model(self._grow(dataset, depth=0))

    def _grow(self, dataset: Dataset, depth: int) -> TreeNode:
        node = TreeNode(depth)
        node.label = most_frequent(dataset.labels)
        node.n_samples = dataset.sample_count()
        node.entropy = dataset.entropy()

        if node.entropy == 0 or (self.max_depth is not None and depth >= self.max_depth):
            return node

        best = self._best_split(dataset)
        if best is None:
            return node

        node.attribute, node.pivot, subsets = best
        node.kind = dataset.attribute_type(node.attribute)
        logger.debug(
            f"depth {depth}: split on attribute {node.attribute} "
            f"({node.kind.name.lower()}, pivot={node.pivot}) into {len(subsets)} children"
        )
        for key, subset in subsets.items():
            node.children[key] = self._grow(subset, depth + 1)
        return node

    def _best_split(self, dataset: Dataset) -> Optional[Tuple[int, Optional[float], Dict[int, Dataset]]]:
        best = None
        best_score = 0.0
        for attribute in range(dataset.attribute_count()):
            if dataset.attribute_type(attribute) == AttributeType.DISCRETE:
                subsets = dataset.split_by_discrete_attribute(attribute)
                if len(subsets) < 2:
                    continue
                pivot = None
            else:
                split = dataset.split_by_continuous_attribute(attribute)
                if split is None:
                    continue
                pivot, (under, over) = split
                subsets = {UNDER: under, OVER: over}

            score = weighted_entropy(subsets.values())
            if best is None or score < best_score:
                best = (attribute, pivot, subsets)
                best_score = score
        return best

    def __repr__(self) -> str:
        return f"ID3(max_depth={self.max_depth})"
