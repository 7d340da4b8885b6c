"""
Daily sentiment calendar: article scores -> one row per calendar day.

    articles --score_articles--> article scores
             --daily_sentiment--> daily means (observed days only)
             --densify_calendar--> every day from first to last (NaN gaps)
             --fill_gaps--> interpolated, boundary gaps set to 0
             --annotate--> interpretation, tooltip, id, year/month/week/dow
"""
import logging
from typing import Mapping

import pandas as pd

from metrics import daily_sentiment
from scoring import score_articles

logger = logging.getLogger(__name__)

POSITIVE_THRESHOLD = 10
NEGATIVE_THRESHOLD = -10

CALENDAR_COLUMNS = [
    "day", "sentiment", "interpolated", "interpretation", "tooltip", "id",
    "year", "month", "week", "dow",
]


class NoDataError(ValueError):
    """Raised when there are no articles/days to build a calendar from."""


def densify_calendar(daily: pd.DataFrame) -> pd.DataFrame:
    """
    Left-join daily scores onto a contiguous day axis spanning
    min(day)..max(day). Days without articles get NaN (not 0).
    """
    need = {"day", "sentiment"}
    miss = need - set(daily.columns)
    if miss:
        raise ValueError(f"'daily' is missing columns: {miss}")
    if daily.empty:
        raise NoDataError("No data: cannot build a calendar from zero days.")

    days = pd.to_datetime(daily["day"]).dt.normalize()
    if days.duplicated().any():
        raise ValueError(f"'daily' has duplicate days: {days[days.duplicated()].head(5).tolist()}")

    axis = pd.date_range(days.min(), days.max(), freq="D", name="day")
    values = pd.Series(daily["sentiment"].astype(float).to_numpy(), index=pd.DatetimeIndex(days))
    out = pd.DataFrame({"day": axis, "sentiment": values.reindex(axis).to_numpy()})
    logger.info("Calendar spans %s..%s (%d days, %d without articles)",
                axis[0].date(), axis[-1].date(), len(out), int(out["sentiment"].isna().sum()))
    return out


def fill_gaps(calendar: pd.DataFrame) -> pd.DataFrame:
    """
    Time-weighted linear interpolation between the nearest known days;
    gaps that cannot be bracketed on both sides become 0.
    """
    out = calendar.copy()
    s = out["sentiment"].astype(float).reset_index(drop=True)
    missing = s.isna()
    # rows are consecutive days, so positional weights are day-count weights
    filled = s.interpolate(method="linear", limit_area="inside").fillna(0.0)
    out["sentiment"] = filled.to_numpy()
    out["interpolated"] = missing.to_numpy()
    logger.debug("Filled %d missing days", int(missing.sum()))
    return out


def interpret(value: float) -> str:
    """Symmetric strict thresholds: exactly 10 or -10 is Neutral."""
    if value > POSITIVE_THRESHOLD:
        return "Positive"
    if value < NEGATIVE_THRESHOLD:
        return "Negative"
    return "Neutral"


def annotate(calendar: pd.DataFrame) -> pd.DataFrame:
    """Add interpretation, tooltip, id and date-grouping fields."""
    out = calendar.copy()
    day = pd.to_datetime(out["day"])
    label = day.dt.strftime("%Y-%m-%d")

    out["interpretation"] = out["sentiment"].map(interpret)
    out["tooltip"] = [
        f"{d}: {v:.2f} ({i})" for d, v, i in zip(label, out["sentiment"], out["interpretation"])
    ]
    out["id"] = "day-" + label
    out["year"] = day.dt.year.astype("int64")
    out["month"] = day.dt.month.astype("int64")
    # ISO week; never below 1
    out["week"] = day.dt.isocalendar().week.astype("int64").clip(lower=1).to_numpy()
    out["dow"] = day.dt.dayofweek.astype("int64")  # 0=Mon
    return out


def build_calendar(articles: pd.DataFrame, lexicon: Mapping[str, int]) -> pd.DataFrame:
    """
    Run the whole pipeline on prepared articles (see data_prep.prepare_articles).
    Raises NoDataError for an empty corpus.
    """
    if articles.empty:
        raise NoDataError("No data: the article collection is empty.")

    scores = score_articles(articles, lexicon)
    daily = daily_sentiment(scores)
    calendar = annotate(fill_gaps(densify_calendar(daily)))
    return calendar[CALENDAR_COLUMNS].reset_index(drop=True)
