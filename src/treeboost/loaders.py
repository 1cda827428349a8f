"""
Loading datasets from delimited text files.
"""

import logging
from typing import Dict, Optional, Sequence

import pandas as pd

from .dataset import AttributeTypes, Dataset

logger = logging.getLogger(__name__)


def read_dataset(
    path: str,
    attribute_types: AttributeTypes,
    delimiter: str = ",",
    missing: Optional[str] = "?",
    drop_columns: Sequence[int] = (),
    label_map: Optional[Dict[float, float]] = None,
    name: Optional[str] = None
) -> Dataset:
    """
    Read a headerless delimited file whose last column is the label.

    Parameters
    ----------
    path : str
        File to read.
    attribute_types : AttributeType or sequence of AttributeType
        Types of the columns left after ``drop_columns`` (label excluded).
    delimiter : str, default=","
        Field separator.
    missing : str or None, default="?"
        Marker of a missing value; rows containing it are removed.
    drop_columns : sequence of int
        Positions of columns to discard, e.g. a record id.
    label_map : dict, optional
        Relabelling applied to the label column, e.g. ``{2: -1, 4: 1}``.
    name : str, optional
        Name of the returned dataset.

    Returns
    -------
    Dataset
    """
    na_values = [missing] if missing is not None else None
    frame = pd.read_csv(path, sep=delimiter, header=None, na_values=na_values)

    n_rows = len(frame)
    frame = frame.dropna()
    if len(frame) < n_rows:
        logger.info(f"removed {n_rows - len(frame)} rows with missing values from {path}")

    if drop_columns:
        frame = frame.drop(columns=[frame.columns[c] for c in drop_columns])

    labels = frame.iloc[:, -1]
    if label_map is not None:
        labels = labels.replace(label_map)

    return Dataset(
        frame.iloc[:, :-1].to_numpy(dtype=float),
        labels.to_numpy(dtype=float),
        attribute_types,
        name=name,
    )
