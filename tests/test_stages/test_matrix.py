"""
Unit tests for the Matrix Builder.
"""

import numpy as np
import pandas as pd
import pytest

from reviewlda.exceptions import EmptyDocumentError
from reviewlda.stages.matrix import MatrixBuilder


@pytest.fixture
def counts():
    return pd.DataFrame(
        [(4, "mocha", 2), (1, "latte", 3), (4, "latte", 1), (1, "barista", 1), (9, "window", 5)],
        columns=["doc_id", "term", "count"]
    )


def test_indices_are_sorted(counts):
    dtm = MatrixBuilder().build(counts)

    assert dtm.terms == ["barista", "latte", "mocha", "window"]
    assert dtm.doc_ids == [1, 4, 9]
    assert dtm.shape == (3, 4)
    assert dtm.column_index["mocha"] == 2
    assert dtm.row_index[9] == 2


def test_cells_are_raw_counts(counts):
    dtm = MatrixBuilder().build(counts)

    for doc_id, term, count in zip(counts["doc_id"], counts["term"], counts["count"]):
        assert dtm.count(doc_id, term) == count
    assert dtm.count(1, "window") == 0
    assert dtm.matrix.dtype == np.int64
    assert dtm.matrix.nnz == len(counts)


def test_shape_matches_distinct_ids(counts):
    dtm = MatrixBuilder().build(counts)

    assert dtm.shape[0] == counts["doc_id"].nunique()
    assert dtm.shape[1] == counts["term"].nunique()


def test_drop_policy_records_empty_documents(counts):
    dtm = MatrixBuilder("drop").build(counts, document_ids=[1, 2, 4, 9, 12])

    assert dtm.doc_ids == [1, 4, 9]
    assert dtm.empty_doc_ids == [2, 12]
    assert not dtm.has_empty_rows()


def test_keep_policy_emits_flagged_zero_rows(counts):
    dtm = MatrixBuilder("keep").build(counts, document_ids=[1, 2, 4, 9])

    assert dtm.doc_ids == [1, 2, 4, 9]
    assert dtm.empty_doc_ids == [2]
    assert dtm.has_empty_rows()
    assert dtm.matrix[dtm.row_index[2]].nnz == 0

    trimmed = dtm.without_empty_rows()
    assert trimmed.doc_ids == [1, 4, 9]
    assert not trimmed.has_empty_rows()


def test_error_policy_raises(counts):
    with pytest.raises(EmptyDocumentError) as excinfo:
        MatrixBuilder("error").build(counts, document_ids=[1, 2, 4, 9])

    assert excinfo.value.doc_ids == [2]


def test_error_policy_passes_without_empty_documents(counts):
    dtm = MatrixBuilder("error").build(counts, document_ids=[1, 4, 9])

    assert dtm.empty_doc_ids == []


def test_unknown_documents_rejected(counts):
    with pytest.raises(ValueError, match="unknown documents"):
        MatrixBuilder().build(counts, document_ids=[1, 4])


def test_invalid_policy():
    with pytest.raises(ValueError):
        MatrixBuilder("ignore")


def test_deterministic_under_row_order(counts):
    first = MatrixBuilder().build(counts)
    shuffled = counts.sample(frac=1.0, random_state=3).reset_index(drop=True)
    second = MatrixBuilder().build(shuffled)

    assert first.doc_ids == second.doc_ids
    assert first.terms == second.terms
    assert np.array_equal(first.matrix.toarray(), second.matrix.toarray())


# Run tests if executed directly
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
