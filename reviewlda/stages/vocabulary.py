"""
Vocabulary Filter.

Removes stop words, numbers, corpus-specific noise, short and rare terms
from the token table and counts surviving terms per document.
"""

import logging
from typing import Iterable, Optional

import pandas as pd
from sklearn.feature_extraction.text import ENGLISH_STOP_WORDS

logger = logging.getLogger(__name__)

COUNT_COLUMNS = ["doc_id", "term", "count"]

CONTRACTIONS = frozenset({
    "i'm", "i've", "i'd", "i'll", "you're", "you've", "you'd", "you'll",
    "he's", "he'd", "he'll", "she's", "she'd", "she'll", "it's", "it'll",
    "we're", "we've", "we'd", "we'll", "they're", "they've", "they'd", "they'll",
    "that's", "there's", "here's", "what's", "who's", "where's", "how's", "let's",
    "don't", "doesn't", "didn't", "can't", "cannot", "couldn't", "won't", "wouldn't",
    "shouldn't", "isn't", "aren't", "wasn't", "weren't", "haven't", "hasn't", "hadn't",
    "mustn't", "needn't", "ain't",
})

# Nouns, verbs and adjectives that ship in the scikit-learn list
OPEN_CLASS_WORDS = frozenset({
    "amount", "back", "bill", "call", "con", "cry", "describe", "detail",
    "done", "empty", "fill", "find", "fire", "found", "front", "full", "get",
    "give", "go", "interest", "keep", "made", "mill", "move", "name", "part",
    "put", "see", "seem", "seemed", "seeming", "seems", "show", "side",
    "sincere", "system", "take", "thick", "thin", "top", "become", "becomes",
    "becoming", "became",
})

DEFAULT_STOP_WORDS = (frozenset(ENGLISH_STOP_WORDS) - OPEN_CLASS_WORDS) | CONTRACTIONS


class VocabularyFilter:
    """
    Narrows the token table to a bounded vocabulary.

    Token-level rules (stop words, numbers, excluded terms, short terms)
    are applied first; the rare-term rule counts occurrences only among
    tokens that survived them.
    """

    def __init__(
        self,
        stop_words: Optional[Iterable[str]] = None,
        excluded_terms: Iterable[str] = (),
        rare_threshold: int = 5,
        min_term_length: int = 3
    ):
        """
        Initialize vocabulary filter.

        Args:
            stop_words: Closed-class words to drop (default: English list)
            excluded_terms: Corpus-specific terms to drop (e.g., brand name)
            rare_threshold: Terms must occur more than this many times corpus-wide
            min_term_length: Minimum characters in a term
        """
        if stop_words is None:
            stop_words = DEFAULT_STOP_WORDS
        self.stop_words = frozenset(w.lower() for w in stop_words)
        self.excluded_terms = frozenset(w.lower() for w in excluded_terms)
        self.rare_threshold = rare_threshold
        self.min_term_length = min_term_length
        self.corpus_counts = pd.Series(dtype="int64")

        logger.info(
            f"Initialized VocabularyFilter with {len(self.stop_words)} stop words, "
            f"{len(self.excluded_terms)} excluded terms, rare_threshold={rare_threshold}, "
            f"min_term_length={min_term_length}"
        )

    def filter(self, tokens: pd.DataFrame) -> pd.DataFrame:
        """
        Filter tokens and count surviving terms per document.

        Args:
            tokens: Table with doc_id, word, lemma (one row per occurrence)

        Returns:
            DataFrame with doc_id, term, count sorted by doc_id then term
        """
        words = tokens["word"].astype(str)
        lemmas = tokens["lemma"].astype(str)

        rules = [
            ("stop word", words.isin(self.stop_words) | lemmas.isin(self.stop_words)),
            ("numeric", lemmas.str.fullmatch(r"\d+").fillna(False).astype(bool)),
            ("excluded", words.isin(self.excluded_terms) | lemmas.isin(self.excluded_terms)),
            ("short", lemmas.str.len() < self.min_term_length),
        ]

        drop = pd.Series(False, index=tokens.index)
        for name, mask in rules:
            newly = mask & ~drop
            logger.debug(f"Removing {int(newly.sum())} {name} tokens")
            drop |= mask

        kept = tokens.loc[~drop, ["doc_id", "lemma"]]

        # Rare terms are judged on the cleaned stream
        self.corpus_counts = kept.groupby("lemma").size().sort_index()
        frequent = self.corpus_counts[self.corpus_counts > self.rare_threshold].index
        rare_count = int((~kept["lemma"].isin(frequent)).sum())
        kept = kept[kept["lemma"].isin(frequent)]

        if kept.empty:
            counts = pd.DataFrame(columns=COUNT_COLUMNS)
        else:
            counts = (
                kept.groupby(["doc_id", "lemma"])
                .size()
                .reset_index(name="count")
                .rename(columns={"lemma": "term"})
                .sort_values(["doc_id", "term"])
                .reset_index(drop=True)
            )
            counts["doc_id"] = counts["doc_id"].astype("int64")
            counts["count"] = counts["count"].astype("int64")

        logger.info(
            f"Vocabulary filter kept {len(kept)} of {len(tokens)} tokens "
            f"({int(drop.sum())} removed by token rules, {rare_count} rare): "
            f"{counts['term'].nunique()} terms in {counts['doc_id'].nunique()} documents"
        )
        return counts
