import logging
import re
from typing import Optional

import pandas as pd

logger = logging.getLogger(__name__)

# a full calendar date must lead; "2022" or "Jun 2022" are not timestamps
ISO_DATE_RX = r"^\d{4}-\d{2}-\d{2}(?:[T ].*)?$"


class TimestampParseError(ValueError):
    """Raised when one or more article timestamps cannot be parsed."""


def normalize_text(s: str) -> str:
    s = (s or "").strip().lower()
    s = re.sub(r"\s+", " ", s)
    return s


def _resolve_columns(df: pd.DataFrame, wanted: dict) -> dict:
    """Map logical names -> actual column names (case-insensitive)."""
    cols = {str(c).lower(): c for c in df.columns}
    missing = [w for w in wanted.values() if w.lower() not in cols]
    if missing:
        raise ValueError(f"CSV is missing required columns: {missing}. Found: {list(df.columns)}")
    return {logical: cols[w.lower()] for logical, w in wanted.items()}


def load_articles(
    path: str,
    *,
    date_col: str = "date",
    text_col: str = "text",
    id_col: Optional[str] = None,
    date_format: Optional[str] = None,
) -> pd.DataFrame:
    """
    Load an article CSV and return it in Article shape:
      article_id, timestamp (UTC), text
    Column names are matched case-insensitively.
    """
    df = pd.read_csv(path)
    logger.info("Read %d rows from %s", len(df), path)
    return prepare_articles(df, date_col=date_col, text_col=text_col, id_col=id_col,
                            date_format=date_format)


def parse_timestamps(values: pd.Series, date_format: Optional[str] = None) -> pd.Series:
    """
    Parse publication timestamps to UTC. Fails fast: a null or unparseable
    value raises TimestampParseError listing the offending rows.

    Without date_format, values must be ISO 8601 starting with YYYY-MM-DD;
    with it, every value must match that strftime format exactly.
    """
    raw = values.astype("string").str.strip().str.replace(r"[\u200b\u200e\ufeff]", "", regex=True)
    if date_format:
        ts = pd.to_datetime(raw, errors="coerce", utc=True, format=date_format, exact=True)
        bad = ts.isna()
    else:
        ts = pd.to_datetime(raw, errors="coerce", utc=True, format="ISO8601")
        bad = ts.isna() | ~raw.str.match(ISO_DATE_RX).fillna(False).astype(bool)
    if bad.any():
        sample = values[bad].head(5)
        shown = ", ".join(f"row {i}: {v!r}" for i, v in sample.items())
        raise TimestampParseError(f"{int(bad.sum())} unparseable timestamp(s): {shown}")
    return ts


def prepare_articles(
    df: pd.DataFrame,
    *,
    date_col: str = "date",
    text_col: str = "text",
    id_col: Optional[str] = None,
    date_format: Optional[str] = None,
) -> pd.DataFrame:
    wanted = {"timestamp": date_col, "text": text_col}
    if id_col:
        wanted["article_id"] = id_col
    cols = _resolve_columns(df, wanted)

    out = pd.DataFrame(index=range(len(df)))
    if id_col:
        ids = df[cols["article_id"]].reset_index(drop=True)
        if ids.duplicated().any():
            dupes = ids[ids.duplicated()].unique().tolist()[:5]
            raise ValueError(f"Article ids must be unique; duplicated: {dupes}")
        out["article_id"] = ids
    else:
        # ingestion order
        out["article_id"] = range(1, len(df) + 1)

    out["timestamp"] = parse_timestamps(df[cols["timestamp"]].reset_index(drop=True),
                                        date_format=date_format)
    out["text"] = (df[cols["text"]].reset_index(drop=True)
                   .fillna("").astype(str).map(normalize_text))
    logger.debug("Prepared %d articles", len(out))
    return out
