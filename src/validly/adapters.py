"""Input adapters for turning tabular sources into Polars frames."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import polars as pl

SUPPORTED_EXTENSIONS = (".csv", ".json", ".parquet", ".ndjson", ".jsonl")


def to_lazyframe(data: Any, infer_types: bool = False) -> pl.LazyFrame:
    """Convert various input formats to a Polars LazyFrame.

    Supports:
        - str / Path: File path (CSV, JSON, NDJSON, Parquet)
        - pl.DataFrame / pl.LazyFrame
        - dict: column name -> values
        - list of dicts: one record per row, as submitted forms usually are
        - pd.DataFrame: pandas DataFrame

    Args:
        data: Input data in any supported format.
        infer_types: Infer column types when reading CSV. Off by default so
            values reach the rules as submitted text.

    Raises:
        ValueError: If the input format is not supported.
        FileNotFoundError: If a file path is provided but doesn't exist.
    """
    if isinstance(data, pl.LazyFrame):
        return data

    if isinstance(data, pl.DataFrame):
        return data.lazy()

    if isinstance(data, dict):
        return pl.DataFrame(data).lazy()

    if isinstance(data, list) and all(isinstance(row, dict) for row in data):
        return pl.DataFrame(data).lazy()

    if isinstance(data, (str, Path)):
        return _load_file(Path(data), infer_types)

    if _is_pandas_dataframe(data):
        return pl.from_pandas(data).lazy()

    raise ValueError(
        f"Unsupported input type: {type(data).__name__}. "
        "Supported types: file path, pl.DataFrame, pl.LazyFrame, dict, list of dicts, pd.DataFrame"
    )


def to_dataframe(data: Any, infer_types: bool = False) -> pl.DataFrame:
    """Like ``to_lazyframe`` but collected."""
    if isinstance(data, pl.DataFrame):
        return data
    return to_lazyframe(data, infer_types).collect()


def _load_file(file_path: Path, infer_types: bool) -> pl.LazyFrame:
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")

    suffix = file_path.suffix.lower()

    if suffix == ".csv":
        if infer_types:
            return pl.scan_csv(file_path)
        return pl.scan_csv(file_path, infer_schema_length=0)
    elif suffix == ".json":
        # JSON doesn't have a scan_ method, read eagerly then convert to lazy
        return pl.read_json(file_path).lazy()
    elif suffix == ".parquet":
        return pl.scan_parquet(file_path)
    elif suffix in (".ndjson", ".jsonl"):
        return pl.scan_ndjson(file_path)
    else:
        raise ValueError(
            f"Unsupported file extension: {suffix}. "
            f"Supported extensions: {', '.join(SUPPORTED_EXTENSIONS)}"
        )


def _is_pandas_dataframe(obj: Any) -> bool:
    """Check if an object is a pandas DataFrame without importing pandas."""
    return type(obj).__name__ == "DataFrame" and type(obj).__module__.startswith("pandas")
