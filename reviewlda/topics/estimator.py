"""
Topic model estimators.

The preprocessing core only depends on TopicEstimator; LdaEstimator is
the default implementation backed by scikit-learn.
"""

import logging
from abc import ABC, abstractmethod

import numpy as np
from sklearn.decomposition import LatentDirichletAllocation

from reviewlda.models.matrix import DocumentTermMatrix
from reviewlda.models.topic import TopicModelResult

logger = logging.getLogger(__name__)


class TopicEstimator(ABC):
    """
    Fits a topic model to a document-term matrix of raw counts.
    """

    @abstractmethod
    def fit(self, dtm: DocumentTermMatrix, topic_count: int, seed: int) -> TopicModelResult:
        """
        Fit the model.

        Args:
            dtm: Document-term matrix (no empty rows)
            topic_count: Number of topics K
            seed: Random seed for reproducible estimation

        Returns:
            Document-topic and topic-term distributions
        """


class LdaEstimator(TopicEstimator):
    """
    Latent Dirichlet Allocation fitted by variational Bayes.
    """

    def __init__(self, max_iter: int = 50, learning_method: str = "batch"):
        self.max_iter = max_iter
        self.learning_method = learning_method

    def fit(self, dtm: DocumentTermMatrix, topic_count: int, seed: int) -> TopicModelResult:
        if topic_count < 1:
            raise ValueError(f"Invalid topic count: {topic_count}. Must be at least 1")

        n_docs, n_terms = dtm.shape
        if n_docs == 0 or n_terms == 0:
            raise ValueError(f"Cannot fit topic model on empty matrix {dtm.shape}")
        if dtm.has_empty_rows():
            raise ValueError("Matrix has empty documents; build it with the 'drop' policy")

        logger.info(
            f"Fitting LDA with K={topic_count}, seed={seed} on {n_docs} documents x {n_terms} terms"
        )

        model = LatentDirichletAllocation(
            n_components=topic_count,
            learning_method=self.learning_method,
            max_iter=self.max_iter,
            random_state=seed
        )
        document_topic = model.fit_transform(dtm.matrix)
        document_topic = document_topic / document_topic.sum(axis=1, keepdims=True)
        topic_term = model.components_ / model.components_.sum(axis=1, keepdims=True)

        logger.info(f"LDA finished after {model.n_iter_} iterations")

        return TopicModelResult(
            document_topic=np.asarray(document_topic),
            topic_term=np.asarray(topic_term),
            doc_ids=list(dtm.doc_ids),
            terms=list(dtm.terms),
            topic_count=topic_count,
            seed=seed
        )
