import csv
import logging
from types import MappingProxyType
from typing import Mapping

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

MIN_VALUE = -5
MAX_VALUE = 5


def make_lexicon(mapping: Mapping[str, int]) -> Mapping[str, int]:
    """
    Validate a word -> integer sentiment table and return a read-only view.

    Words are case-folded and stripped. Values must be integers in [-5, 5].
    """
    out = {}
    for word, value in mapping.items():
        key = str(word).strip().casefold()
        if not key:
            raise ValueError("Lexicon contains an empty word")
        if isinstance(value, (bool, np.bool_)) or not float(value).is_integer():
            raise ValueError(f"Lexicon value for {word!r} is not an integer: {value!r}")
        value = int(value)
        if not MIN_VALUE <= value <= MAX_VALUE:
            raise ValueError(f"Lexicon value for {word!r} out of range [{MIN_VALUE}, {MAX_VALUE}]: {value}")
        if key in out:
            raise ValueError(f"Duplicate lexicon word after case-folding: {key!r}")
        out[key] = value
    return MappingProxyType(out)


def load_lexicon(path: str, sep: str = "\t", header: bool = False) -> Mapping[str, int]:
    """
    Load an AFINN-style lexicon file (word<TAB>value per line).

    Multi-word entries are kept as-is; they never match single tokens.
    """
    df = pd.read_csv(
        path,
        sep=sep,
        header=0 if header else None,
        usecols=[0, 1],
        dtype=str,
        keep_default_na=False,
        quoting=csv.QUOTE_NONE,
    )
    df.columns = ["word", "value"]
    values = pd.to_numeric(df["value"], errors="coerce")
    if values.isna().any():
        bad = df.loc[values.isna(), "word"].head(5).tolist()
        raise ValueError(f"Lexicon {path} has non-numeric values for: {bad}")
    folded = df["word"].str.strip().str.casefold()
    if folded.duplicated().any():
        dupes = folded[folded.duplicated()].head(5).tolist()
        raise ValueError(f"Lexicon {path} has duplicate words: {dupes}")
    lex = make_lexicon(dict(zip(df["word"], values)))
    logger.info("Loaded %d lexicon entries from %s", len(lex), path)
    return lex
