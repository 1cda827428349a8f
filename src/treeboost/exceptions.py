"""Exceptions raised by dataset and boosting operations."""


class DataError(ValueError):
    """Invalid data handed to a dataset or an estimator."""


class DimensionError(DataError):
    """Shapes of features, labels or attribute types disagree."""


class AttributeKindError(DataError):
    """A discrete-only operation was used on a continuous attribute, or vice versa."""


class DegenerateSplitError(DataError):
    """A pivot matched an observed attribute value exactly."""
