"""EDA recording loaders."""

from .csv_loader import EDAFileError, load_eda_csv

__all__ = ["EDAFileError", "load_eda_csv"]
