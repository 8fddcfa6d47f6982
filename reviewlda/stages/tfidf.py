"""
TF-IDF Pruner.

Drops (document, term) pairs whose inverse document frequency falls
outside a percentile band of the IDF distribution.
"""

import logging
from typing import Optional

import numpy as np
import pandas as pd

from reviewlda.exceptions import DegenerateDistributionError

logger = logging.getLogger(__name__)

COUNT_COLUMNS = ["doc_id", "term", "count"]


class TfidfPruner:
    """
    Prunes terms that are too common or too rare across documents.

    Document frequencies and totals come from the count table handed in,
    so cutoffs are relative to the already-filtered vocabulary.
    Percentiles are taken over the (document, term) pair table, one IDF
    value per pair, rather than over distinct terms.
    """

    def __init__(self, lower_percentile: float = 5.0, upper_percentile: float = 95.0):
        """
        Initialize TF-IDF pruner.

        Args:
            lower_percentile: Pairs must have IDF above this percentile
            upper_percentile: Pairs must have IDF below this percentile

        Raises:
            ValueError: If the percentiles do not form a band within 0-100
        """
        if not (0 <= lower_percentile < upper_percentile <= 100):
            raise ValueError(
                f"Invalid IDF percentile band ({lower_percentile}, {upper_percentile}). "
                f"Need 0 <= lower < upper <= 100"
            )
        self.lower_percentile = lower_percentile
        self.upper_percentile = upper_percentile
        self.lower_cut: Optional[float] = None
        self.upper_cut: Optional[float] = None

        logger.info(
            f"Initialized TfidfPruner with percentile band "
            f"({lower_percentile}, {upper_percentile})"
        )

    @staticmethod
    def annotate(counts: pd.DataFrame) -> pd.DataFrame:
        """
        Attach total, tf, idf and tf_idf columns to a count table.

        TF = count / total tokens in the document
        IDF = log(documents / documents containing the term)
        """
        table = counts.copy()
        n_documents = table["doc_id"].nunique()

        table["total"] = table.groupby("doc_id")["count"].transform("sum")
        table["tf"] = table["count"] / table["total"]
        document_frequency = table.groupby("term")["doc_id"].transform("nunique")
        table["idf"] = np.log(n_documents / document_frequency.astype(float))
        table["tf_idf"] = table["tf"] * table["idf"]
        return table

    def prune(self, counts: pd.DataFrame) -> pd.DataFrame:
        """
        Keep pairs whose IDF lies strictly inside the percentile band.

        Args:
            counts: Table with doc_id, term, count

        Returns:
            Table with doc_id, term, count (raw counts, no weights)

        Raises:
            DegenerateDistributionError: If the IDF distribution is empty,
                the band collapses, or no pair survives
        """
        if counts.empty:
            raise DegenerateDistributionError(
                "Cannot compute IDF percentiles: no (document, term) pairs survived filtering"
            )

        table = self.annotate(counts)
        idf = table["idf"].to_numpy()
        self.lower_cut, self.upper_cut = (
            float(v) for v in np.percentile(idf, [self.lower_percentile, self.upper_percentile])
        )

        logger.info(
            f"IDF cutoffs over {len(table)} pairs: "
            f"P{self.lower_percentile:g}={self.lower_cut:.4f}, "
            f"P{self.upper_percentile:g}={self.upper_cut:.4f}"
        )

        if not self.lower_cut < self.upper_cut:
            logger.error("IDF distribution is degenerate; corpus too small or uniform")
            raise DegenerateDistributionError(
                f"IDF percentile band is empty: lower={self.lower_cut:.4f}, "
                f"upper={self.upper_cut:.4f}"
            )

        inside = (table["idf"] > self.lower_cut) & (table["idf"] < self.upper_cut)
        pruned = table.loc[inside, COUNT_COLUMNS].reset_index(drop=True)

        if pruned.empty:
            raise DegenerateDistributionError(
                f"No (document, term) pairs have IDF strictly inside "
                f"({self.lower_cut:.4f}, {self.upper_cut:.4f})"
            )

        logger.info(
            f"TF-IDF pruning kept {len(pruned)} of {len(table)} pairs: "
            f"{pruned['term'].nunique()} of {table['term'].nunique()} terms"
        )
        return pruned
