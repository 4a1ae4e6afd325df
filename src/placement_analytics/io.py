import logging
from pathlib import Path
from typing import IO, Optional

import pandas as pd

from .errors import LoadError
from .mapping import CANONICAL_COLUMNS, apply_aliases, unresolved_fields
from .records import RecordStore

logger = logging.getLogger(__name__)

Source = str | Path | IO[str] | IO[bytes]


def _source_label(source: Source) -> str:
    if isinstance(source, (str, Path)):
        return str(source)
    return getattr(source, "name", type(source).__name__)


def read_csv(source: Source) -> pd.DataFrame:
    # Keep literal strings so numeric coercion decides what becomes NaN.
    return pd.read_csv(source, keep_default_na=False)


def load_records(source: Source, seed: Optional[int] = None) -> RecordStore:
    """Read a placement CSV into a RecordStore.

    Raises LoadError when the source cannot be read, has no rows, or matches
    none of the known column names. Individual unmatched fields are not
    fatal; they load as sentinels and are listed in ``missing_fields``.
    """

    label = _source_label(source)
    try:
        raw_df = read_csv(source)
    except FileNotFoundError as exc:
        logger.error("Dataset not found: %s", label)
        raise LoadError("Dataset file not found", source=label) from exc
    except pd.errors.EmptyDataError as exc:
        logger.error("Dataset is empty: %s", label)
        raise LoadError("Dataset is empty", source=label) from exc
    except (pd.errors.ParserError, UnicodeDecodeError, OSError) as exc:
        logger.error("Unable to parse dataset %s: %s", label, exc)
        raise LoadError(f"Unable to parse dataset: {exc}", source=label) from exc

    return build_store(raw_df, seed=seed, source=label)


def build_store(raw_df: pd.DataFrame, seed: Optional[int] = None, source: Optional[str] = None) -> RecordStore:
    missing = unresolved_fields(raw_df)
    if len(missing) == len(CANONICAL_COLUMNS):
        logger.error("No known columns in dataset %s", source)
        raise LoadError("Dataset has none of the expected columns", source=source)
    if raw_df.empty:
        logger.error("Dataset has a header but no rows: %s", source)
        raise LoadError("Dataset has no rows", source=source)

    store = RecordStore.from_canonical(apply_aliases(raw_df), seed=seed, missing_fields=missing, source=source)
    logger.info("Loaded %d records from %s", len(store), source)
    return store
