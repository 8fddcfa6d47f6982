"""
Topic data model.

Represents the output of a topic model and the per-topic summaries
built from it.
"""

from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np


@dataclass
class TopicModelResult:
    """
    Output of a topic model fit.
    Rows of both weight matrices are probability distributions.
    """
    document_topic: np.ndarray  # n_docs x topic_count
    topic_term: np.ndarray  # topic_count x n_terms
    doc_ids: List[int]
    terms: List[str]
    topic_count: int
    seed: int

    def __post_init__(self):
        if self.document_topic.shape != (len(self.doc_ids), self.topic_count):
            raise ValueError(
                f"document_topic shape {self.document_topic.shape} does not match "
                f"({len(self.doc_ids)}, {self.topic_count})"
            )
        if self.topic_term.shape != (self.topic_count, len(self.terms)):
            raise ValueError(
                f"topic_term shape {self.topic_term.shape} does not match "
                f"({self.topic_count}, {len(self.terms)})"
            )


@dataclass
class TopicSummary:
    """
    One topic described against review metadata.
    """
    topic_id: int
    label: str
    top_terms: List[str] = field(default_factory=list)
    document_count: int = 0
    mean_rating: Optional[float] = None  # Over documents with a rating
    mean_length: Optional[float] = None
    image_share: Optional[float] = None  # Fraction of documents with images

    @classmethod
    def from_dict(cls, data: dict) -> "TopicSummary":
        """Create TopicSummary from JSON dict."""
        return cls(
            topic_id=data["topic_id"],
            label=data["label"],
            top_terms=data.get("top_terms", []),
            document_count=data.get("document_count", 0),
            mean_rating=data.get("mean_rating"),
            mean_length=data.get("mean_length"),
            image_share=data.get("image_share")
        )

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "topic_id": self.topic_id,
            "label": self.label,
            "top_terms": self.top_terms,
            "document_count": self.document_count,
            "mean_rating": self.mean_rating,
            "mean_length": self.mean_length,
            "image_share": self.image_share
        }
