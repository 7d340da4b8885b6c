import logging

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

# Dobbs v. Jackson decision; reference date for the before/after split
EVENT_DATE = pd.Timestamp("2022-06-24")

INTERPRETATIONS = ["Negative", "Neutral", "Positive"]


def daily_sentiment(scores: pd.DataFrame) -> pd.DataFrame:
    """
    Unweighted mean of article scores per calendar day.

    Expects columns: ['day', 'sentiment'] (one row per article).
    Returns: day, sentiment, n_articles. Days without articles are absent.
    """
    need = {"day", "sentiment"}
    miss = need - set(scores.columns)
    if miss:
        raise ValueError(f"'scores' is missing columns: {miss}")

    agg = (scores.groupby("day", sort=True)
                 .agg(sentiment=("sentiment", "mean"),
                      n_articles=("sentiment", "size"))
                 .reset_index())
    agg["sentiment"] = agg["sentiment"].astype(float)
    logger.info("Aggregated %d articles into %d days", len(scores), len(agg))
    return agg


def split_by_event(frame: pd.DataFrame, event_date=EVENT_DATE, date_col: str = "day") -> pd.DataFrame:
    """Label each row 'before' (strictly earlier than event_date) or 'after'."""
    if date_col not in frame.columns:
        raise ValueError(f"frame is missing column: {date_col!r}")
    out = frame.copy()
    dates = pd.to_datetime(out[date_col])
    if dates.dt.tz is not None:
        dates = dates.dt.tz_localize(None)
    out["period"] = np.where(dates < pd.Timestamp(event_date), "before", "after")
    return out


def event_window_summary(calendar: pd.DataFrame, event_date=EVENT_DATE) -> pd.DataFrame:
    """
    Per-period summary of a filled calendar:
      period, days, mean, median, Negative, Neutral, Positive (day counts)
    """
    need = {"day", "sentiment", "interpretation"}
    miss = need - set(calendar.columns)
    if miss:
        raise ValueError(f"'calendar' is missing columns: {miss}")

    labelled = split_by_event(calendar, event_date=event_date)
    stats = labelled.groupby("period").agg(
        days=("sentiment", "size"),
        mean=("sentiment", "mean"),
        median=("sentiment", "median"),
    )
    counts = pd.crosstab(labelled["period"], labelled["interpretation"])
    counts = counts.reindex(columns=INTERPRETATIONS, fill_value=0)
    out = stats.join(counts).reindex([p for p in ("before", "after") if p in stats.index])
    return out.reset_index()
