import matplotlib

matplotlib.use("Agg")

import pandas as pd
import pytest

from data_prep import prepare_articles
from lexicon import make_lexicon


@pytest.fixture
def lexicon():
    return make_lexicon({
        "good": 5, "win": 4, "support": 2, "protect": 1,
        "bad": -5, "ban": -2, "fear": -2, "crisis": -3,
        "can't stand": -3,
    })


@pytest.fixture
def raw_articles():
    """Two articles on 2022-06-24 (+20, 0) and one on 2022-06-26 (-30)."""
    return pd.DataFrame({
        "Date": ["2022-06-24 09:15:00", "2022-06-24T18:40:00", "2022-06-26"],
        "Text": [
            "Good, good. GOOD news! good",
            "The court released its opinion on Friday.",
            "bad bad bad bad bad bad",
        ],
    })


@pytest.fixture
def articles(raw_articles):
    return prepare_articles(raw_articles)
