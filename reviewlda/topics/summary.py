"""
Topic Summarizer.

Assigns each document its dominant topic and describes every topic
against review metadata: rating, length and images.
"""

import logging
from typing import Dict, List, Optional

import numpy as np
import pandas as pd

from reviewlda.models.topic import TopicModelResult, TopicSummary
from reviewlda.topics.labeling import top_terms

logger = logging.getLogger(__name__)

RATINGS = [1, 2, 3, 4, 5]


class TopicSummarizer:
    """
    Summarizes a fitted topic model against the documents table.
    """

    def __init__(self, top_n: int = 10):
        """
        Args:
            top_n: Number of top terms reported per topic
        """
        self.top_n = top_n

    def assign(self, result: TopicModelResult) -> pd.DataFrame:
        """
        Dominant topic per document.

        Returns:
            DataFrame with doc_id, topic, weight; ties go to the lower topic
        """
        topics = np.argmax(result.document_topic, axis=1)
        weights = result.document_topic[np.arange(len(topics)), topics]
        return pd.DataFrame({
            "doc_id": list(result.doc_ids),
            "topic": topics.astype(int),
            "weight": weights.astype(float)
        })

    def summarize(
        self,
        result: TopicModelResult,
        documents: pd.DataFrame,
        labels: Optional[Dict[int, str]] = None
    ) -> List[TopicSummary]:
        """
        Build one summary per topic.

        Args:
            result: Fitted topic model
            documents: Documents table from the record loader
            labels: Optional topic index -> label

        Returns:
            Summaries ordered by topic index
        """
        labels = labels or {}
        assigned = self.assign(result).merge(documents, on="doc_id", how="left")
        terms_by_topic = top_terms(result, self.top_n)

        summaries = []
        for topic_id in range(result.topic_count):
            members = assigned[assigned["topic"] == topic_id]
            ratings = members["rating"].dropna().astype(float)

            summary = TopicSummary(
                topic_id=topic_id,
                label=labels.get(topic_id, " / ".join(terms_by_topic[topic_id][:3])),
                top_terms=terms_by_topic[topic_id],
                document_count=len(members),
                mean_rating=float(ratings.mean()) if len(ratings) else None,
                mean_length=float(members["length"].mean()) if len(members) else None,
                image_share=float(members["has_image"].astype(bool).mean()) if len(members) else None
            )
            summaries.append(summary)

        logger.info(
            f"Summarized {result.topic_count} topics over {len(assigned)} documents"
        )
        return summaries

    def rating_profile(self, result: TopicModelResult, documents: pd.DataFrame) -> pd.DataFrame:
        """
        Share of each star rating within each topic.

        Returns:
            DataFrame indexed by topic with one column per rating 1-5;
            documents without a rating are ignored
        """
        assigned = self.assign(result).merge(documents[["doc_id", "rating"]], on="doc_id", how="left")
        rated = assigned.dropna(subset=["rating"])

        if rated.empty:
            profile = pd.DataFrame(dtype=float)
        else:
            profile = pd.crosstab(rated["topic"], rated["rating"].astype(int), normalize="index")
        profile = profile.reindex(index=range(result.topic_count), columns=RATINGS, fill_value=0.0)
        profile = profile.fillna(0.0)
        profile.index.name = "topic"
        profile.columns.name = "rating"
        return profile

    @staticmethod
    def to_frame(summaries: List[TopicSummary]) -> pd.DataFrame:
        """Tabular form of summaries, top terms joined with commas."""
        rows = []
        for summary in summaries:
            row = summary.to_dict()
            row["top_terms"] = ", ".join(row["top_terms"])
            rows.append(row)
        return pd.DataFrame(rows, columns=[
            "topic_id", "label", "top_terms", "document_count",
            "mean_rating", "mean_length", "image_share"
        ])
