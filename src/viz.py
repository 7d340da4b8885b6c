from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from typing import Optional, Tuple, List

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
from matplotlib import colors

from sentiment_calendar import NEGATIVE_THRESHOLD, POSITIVE_THRESHOLD

logger = logging.getLogger(__name__)

DOW_LABELS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


@dataclass(frozen=True)
class CalendarStyle:
    """Styling passed explicitly to each plot (no global rcParams)."""
    font_family: str = "sans-serif"
    font_size: float = 9.0
    cmap: str = "RdBu"
    vmin: float = -30.0
    vmax: float = 30.0
    width: float = 14.0
    row_height: float = 2.2
    dpi: int = 150


def _ensure_dir(p: Optional[str]) -> None:
    if p:
        d = os.path.dirname(p)
        if d and not os.path.exists(d):
            os.makedirs(d, exist_ok=True)


def _finish(fig: plt.Figure, out_path: Optional[str], show: bool, dpi: int) -> Optional[str]:
    saved = None
    if out_path:
        _ensure_dir(out_path)
        fig.savefig(out_path, dpi=dpi, bbox_inches="tight")
        saved = out_path
        logger.info("Saved %s", out_path)
    if show:
        plt.show()
    else:
        plt.close(fig)
    return saved


def _year_grid(sub: pd.DataFrame) -> np.ndarray:
    """7 x 54 (dow x week-of-year) grid of sentiment values; NaN where no day."""
    grid = np.full((7, 54), np.nan)
    # week columns counted from Jan 1, not ISO weeks (which spill across years)
    days = pd.to_datetime(sub["day"])
    col = ((days.dt.dayofyear - 1 + days.iloc[0].replace(month=1, day=1).dayofweek) // 7).to_numpy()
    grid[sub["dow"].to_numpy(), col] = sub["sentiment"].to_numpy()
    return grid


def plot_sentiment_calendar(
    calendar: pd.DataFrame,
    out_path: Optional[str] = None,
    show: bool = False,
    *,
    style: CalendarStyle = CalendarStyle(),
    title: str = "Daily article sentiment",
) -> Tuple[plt.Figure, List[plt.Axes], Optional[str]]:
    """
    Calendar heatmap: one panel per year, rows = day of week, cols = week.
    Expects the frame returned by sentiment_calendar.build_calendar.
    """
    need = {"day", "sentiment", "year", "dow"}
    miss = need - set(calendar.columns)
    if miss:
        raise ValueError(f"'calendar' is missing columns: {miss}")
    if calendar.empty:
        raise ValueError("Nothing to plot: calendar is empty.")

    years = sorted(calendar["year"].unique())
    font = {"family": style.font_family, "size": style.font_size}
    fig, axes = plt.subplots(len(years), 1, squeeze=False,
                             figsize=(style.width, style.row_height * len(years)))
    axes = list(axes[:, 0])
    norm = colors.Normalize(vmin=style.vmin, vmax=style.vmax)

    im = None
    for ax, year in zip(axes, years):
        sub = calendar[calendar["year"] == year]
        im = ax.imshow(_year_grid(sub), aspect="auto", cmap=style.cmap, norm=norm)
        ax.set_yticks(range(7))
        ax.set_yticklabels(DOW_LABELS, fontdict=font)
        month_starts = pd.date_range(f"{year}-01-01", f"{year}-12-31", freq="MS")
        ax.set_xticks([(d.dayofyear - 1 + month_starts[0].dayofweek) // 7 for d in month_starts])
        ax.set_xticklabels([d.strftime("%b") for d in month_starts], fontdict=font)
        ax.set_ylabel(str(year), fontdict=font)

    axes[0].set_title(title, fontdict={**font, "size": style.font_size + 3})
    fig.colorbar(im, ax=axes, shrink=0.8, label="Sentiment")
    return fig, axes, _finish(fig, out_path, show, style.dpi)


def plot_daily_timeline(
    calendar: pd.DataFrame,
    out_path: Optional[str] = None,
    show: bool = False,
    *,
    style: CalendarStyle = CalendarStyle(),
    event_date=None,
    title: str = "Daily article sentiment",
) -> Tuple[plt.Figure, plt.Axes, Optional[str]]:
    """Line of daily sentiment; interpolated days marked, optional event line."""
    need = {"day", "sentiment", "interpolated"}
    miss = need - set(calendar.columns)
    if miss:
        raise ValueError(f"'calendar' is missing columns: {miss}")

    font = {"family": style.font_family, "size": style.font_size}
    fig, ax = plt.subplots(figsize=(style.width, style.row_height * 2))
    day = pd.to_datetime(calendar["day"])
    ax.plot(day, calendar["sentiment"], linewidth=0.9, color="#444444")
    gaps = calendar["interpolated"].to_numpy(dtype=bool)
    if gaps.any():
        ax.scatter(day[gaps], calendar.loc[gaps, "sentiment"], s=6, color="#d62728",
                   label="interpolated")
        ax.legend(prop=font)
    ax.axhline(POSITIVE_THRESHOLD, linestyle=":", linewidth=0.8, color="#2166ac")
    ax.axhline(NEGATIVE_THRESHOLD, linestyle=":", linewidth=0.8, color="#b2182b")
    if event_date is not None:
        ax.axvline(pd.Timestamp(event_date), linestyle="--", linewidth=1.0, color="black")
    ax.set_title(title, fontdict={**font, "size": style.font_size + 3})
    ax.set_ylabel("Sentiment", fontdict=font)
    fig.tight_layout()
    return fig, ax, _finish(fig, out_path, show, style.dpi)


def save_calendar_csv(calendar: pd.DataFrame, out_csv_path: str) -> str:
    """Write the calendar table; days as YYYY-MM-DD."""
    _ensure_dir(out_csv_path)
    out = calendar.copy()
    out["day"] = pd.to_datetime(out["day"]).dt.strftime("%Y-%m-%d")
    out.to_csv(out_csv_path, index=False, float_format="%.6f", lineterminator="\n")
    logger.info("Wrote %d calendar rows to %s", len(out), out_csv_path)
    return out_csv_path
