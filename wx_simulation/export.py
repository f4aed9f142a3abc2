"""
Single DataFrame writer shared by the simulation and replay exporters.
"""

from __future__ import annotations

from pathlib import Path
from typing import Union

import pandas as pd

EXPORT_FORMATS = ("csv", "json", "parquet")


def check_format(format: str) -> str:
    if format not in EXPORT_FORMATS:
        raise ValueError(f"Unsupported format: {format}; expected one of {EXPORT_FORMATS}")
    return format


def write_frame(df: pd.DataFrame, path: Union[str, Path], format: str = "csv") -> Path:
    """Write ``df`` without its index; parquet needs the optional pyarrow extra."""
    check_format(format)
    path = Path(path)
    if format == "csv":
        df.to_csv(path, index=False)
    elif format == "json":
        df.to_json(path, orient="records", date_format="iso")
    else:
        df.to_parquet(path, index=False)
    return path


__all__ = ["EXPORT_FORMATS", "check_format", "write_frame"]
