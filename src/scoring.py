import logging
import re
from typing import List, Mapping, Tuple

import pandas as pd

logger = logging.getLogger(__name__)

# word runs; apostrophes only inside a word (don't, children's)
TOKEN_RX = re.compile(r"\w+(?:'\w+)*")


def tokenize(text: str) -> List[str]:
    """Case-folded word tokens. No stemming, no stop-word removal."""
    s = "" if pd.isna(text) else str(text)
    s = s.casefold().replace("\u2019", "'")
    return TOKEN_RX.findall(s)


def score_tokens(tokens: List[str], lexicon: Mapping[str, int]) -> List[Tuple[str, int]]:
    return [(t, lexicon[t]) for t in tokens if t in lexicon]


def score_text(text: str, lexicon: Mapping[str, int]) -> int:
    """Sum (not mean) of matched token values; 0 when nothing matches."""
    return sum(v for _, v in score_tokens(tokenize(text), lexicon))


def score_articles(articles: pd.DataFrame, lexicon: Mapping[str, int]) -> pd.DataFrame:
    """
    One ArticleScore row per article:
      article_id, day, sentiment, n_tokens, n_matched

    Expects the frame returned by data_prep.prepare_articles.
    """
    need = {"article_id", "timestamp", "text"}
    miss = need - set(articles.columns)
    if miss:
        raise ValueError(f"'articles' is missing columns: {miss}")

    tokens = articles[["article_id", "text"]].copy()
    tokens["word"] = tokens["text"].map(tokenize)
    tokens = tokens.explode("word").dropna(subset=["word"])
    tokens["value"] = tokens["word"].map(dict(lexicon))  # NaN on miss

    n_tokens = tokens.groupby("article_id").size()
    matched = tokens.dropna(subset=["value"])
    sums = matched.groupby("article_id")["value"].sum()
    n_matched = matched.groupby("article_id").size()

    # calendar day of the (UTC) timestamp, kept tz-naive
    day = articles["timestamp"].dt.normalize()
    if day.dt.tz is not None:
        day = day.dt.tz_localize(None)

    ids = articles["article_id"]
    out = pd.DataFrame({"article_id": ids.to_numpy(), "day": day.to_numpy()})
    out["sentiment"] = ids.map(sums).fillna(0).astype("int64").to_numpy()
    out["n_tokens"] = ids.map(n_tokens).fillna(0).astype("int64").to_numpy()
    out["n_matched"] = ids.map(n_matched).fillna(0).astype("int64").to_numpy()

    unmatched = int((out["n_matched"] == 0).sum())
    if unmatched:
        logger.warning("%d of %d articles had no lexicon match (scored 0)", unmatched, len(out))
    logger.info("Scored %d articles", len(out))
    return out
