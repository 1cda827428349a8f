"""
Entropy-partitioned datasets and multi-class AdaBoost from scratch.

Implements a typed tabular Dataset with the split primitives of ID3-style
tree induction, and SAMME AdaBoost (Zhu et al., 2009) over any weak learner
exposing ``fit(Dataset) -> Model``.
"""

from .dataset import AttributeType, Dataset, DatasetBuilder
from .core import AdaBoost, AdaBoostModel
from .learners import Learner, Model, SklearnLearner
from .tree import ID3, ID3Model
from .validation import Report, cross_validate
from .loaders import read_dataset
from .exceptions import DataError, DimensionError, AttributeKindError, DegenerateSplitError

__version__ = "0.1.0"
__all__ = [
    "AttributeType", "Dataset", "DatasetBuilder",
    "AdaBoost", "AdaBoostModel",
    "Learner", "Model", "SklearnLearner",
    "ID3", "ID3Model",
    "Report", "cross_validate",
    "read_dataset",
    "DataError", "DimensionError", "AttributeKindError", "DegenerateSplitError",
]
