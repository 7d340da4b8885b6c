"""
Build the daily sentiment calendar for an article CSV.

    sentiment-calendar articles.csv --lexicon AFINN-en-165.txt \
        --out-csv out/calendar.csv --out-png out/calendar.png
"""
import argparse
import logging
import sys
from typing import List, Optional

import pandas as pd

from data_prep import TimestampParseError, load_articles
from lexicon import load_lexicon
from metrics import EVENT_DATE, event_window_summary
from sentiment_calendar import NoDataError, build_calendar
from viz import CalendarStyle, plot_daily_timeline, plot_sentiment_calendar, save_calendar_csv

logger = logging.getLogger(__name__)


def _date_arg(value: str) -> pd.Timestamp:
    try:
        ts = pd.Timestamp(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid date: {value!r}") from e
    if pd.isna(ts):
        raise argparse.ArgumentTypeError(f"invalid date: {value!r}")
    return ts


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="sentiment-calendar", description=__doc__.strip().splitlines()[0])
    p.add_argument("articles", help="CSV with one article per row")
    p.add_argument("--lexicon", required=True, help="word<TAB>value lexicon file (AFINN format)")
    p.add_argument("--date-col", default="date")
    p.add_argument("--text-col", default="text")
    p.add_argument("--id-col", default=None)
    p.add_argument("--date-format", default=None,
                   help="strftime format of the date column (default: ISO 8601)")
    p.add_argument("--out-csv", default="out/calendar.csv")
    p.add_argument("--out-png", default=None, help="calendar heatmap image")
    p.add_argument("--timeline-png", default=None, help="daily timeline image")
    p.add_argument("--event-date", default=EVENT_DATE, type=_date_arg,
                   help="reference date for the before/after summary")
    p.add_argument("--font", default="sans-serif", help="font family for plots")
    p.add_argument("-v", "--verbose", action="store_true")
    return p


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        lexicon = load_lexicon(args.lexicon)
        articles = load_articles(args.articles, date_col=args.date_col,
                                 text_col=args.text_col, id_col=args.id_col,
                                 date_format=args.date_format)
        calendar = build_calendar(articles, lexicon)
    except (NoDataError, TimestampParseError) as e:
        logger.error("%s", e)
        return 1
    except ValueError as e:
        logger.error("Invalid input: %s", e)
        return 1

    save_calendar_csv(calendar, args.out_csv)

    style = CalendarStyle(font_family=args.font)
    if args.out_png:
        plot_sentiment_calendar(calendar, args.out_png, style=style)
    if args.timeline_png:
        plot_daily_timeline(calendar, args.timeline_png, style=style, event_date=args.event_date)

    summary = event_window_summary(calendar, event_date=args.event_date)
    for row in summary.itertuples(index=False):
        logger.info("%s %s: %d days, mean %.2f, median %.2f",
                    row.period, args.event_date.date(), row.days, row.mean, row.median)
    return 0


if __name__ == "__main__":
    sys.exit(main())
