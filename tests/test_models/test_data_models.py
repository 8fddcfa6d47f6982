"""
Basic unit tests for data models.
"""

from dataclasses import FrozenInstanceError

import numpy as np
import pytest
from scipy import sparse

from reviewlda.models.document import Document
from reviewlda.models.matrix import DocumentTermMatrix
from reviewlda.models.topic import TopicModelResult, TopicSummary


def test_document_validation():
    """Test Document rating and length validation."""
    document = Document(doc_id=3, text="Great latte", rating=5, length=11)
    assert document.rating == 5

    Document(doc_id=4, text="No rating here", rating=None, length=14)

    with pytest.raises(ValueError, match="Invalid rating"):
        Document(doc_id=5, text="Too many stars", rating=6, length=14)

    with pytest.raises(ValueError, match="Length"):
        Document(doc_id=6, text="abc", length=10)


def test_document_is_immutable():
    document = Document(doc_id=1, text="Fine coffee", length=11)

    with pytest.raises(FrozenInstanceError):
        document.doc_id = 2


def test_matrix_shape_validation():
    with pytest.raises(ValueError, match="shape"):
        DocumentTermMatrix(
            matrix=sparse.csr_matrix(np.zeros((2, 2), dtype=np.int64)),
            doc_ids=[0, 1, 2],
            terms=["latte", "mocha"]
        )


def test_matrix_policy_validation():
    with pytest.raises(ValueError, match="policy"):
        DocumentTermMatrix(
            matrix=sparse.csr_matrix(np.ones((1, 1), dtype=np.int64)),
            doc_ids=[0],
            terms=["latte"],
            empty_document_policy="ignore"
        )


def test_matrix_metadata():
    dtm = DocumentTermMatrix(
        matrix=sparse.csr_matrix(np.array([[1, 0], [0, 2]], dtype=np.int64)),
        doc_ids=[4, 9],
        terms=["latte", "mocha"],
        empty_doc_ids=[5]
    )

    metadata = dtm.metadata()

    assert metadata["doc_ids"] == [4, 9]
    assert metadata["terms"] == ["latte", "mocha"]
    assert metadata["empty_doc_ids"] == [5]
    assert metadata["shape"] == [2, 2]
    assert metadata["nonzero"] == 2


def test_topic_result_shape_validation():
    with pytest.raises(ValueError, match="document_topic"):
        TopicModelResult(
            document_topic=np.ones((3, 2)) / 2,
            topic_term=np.ones((2, 4)) / 4,
            doc_ids=[0, 1],
            terms=["a", "b", "c", "d"],
            topic_count=2,
            seed=0
        )


def test_topic_summary_serialization():
    """Test TopicSummary to/from dict conversion."""
    summary = TopicSummary(
        topic_id=2,
        label="Mobile ordering",
        top_terms=["mobile", "order", "app"],
        document_count=40,
        mean_rating=2.5,
        mean_length=180.0,
        image_share=0.1
    )

    restored = TopicSummary.from_dict(summary.to_dict())

    assert restored == summary


# Run tests if executed directly
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
