"""
Matrix Builder.

Assembles the final (document, term, count) table into a sparse
document-term matrix.
"""

import logging
from typing import Iterable, Optional

import numpy as np
import pandas as pd
from scipy import sparse

from reviewlda.exceptions import EmptyDocumentError
from reviewlda.models.matrix import EMPTY_DOCUMENT_POLICIES, DocumentTermMatrix

logger = logging.getLogger(__name__)


class MatrixBuilder:
    """
    Builds a CSR matrix of raw counts.

    Columns are terms in lexicographic (code point) order and rows are
    document ids in ascending order, so identical input always yields
    identical indices.
    """

    def __init__(self, empty_document_policy: str = "drop"):
        """
        Initialize matrix builder.

        Args:
            empty_document_policy: What to do with documents that have no
                surviving terms: "drop" (no row), "keep" (all-zero row) or
                "error" (raise EmptyDocumentError)
        """
        if empty_document_policy not in EMPTY_DOCUMENT_POLICIES:
            raise ValueError(
                f"Invalid empty document policy: {empty_document_policy}. "
                f"Must be one of {EMPTY_DOCUMENT_POLICIES}"
            )
        self.empty_document_policy = empty_document_policy

        logger.info(f"Initialized MatrixBuilder with empty_document_policy={empty_document_policy}")

    def build(
        self,
        counts: pd.DataFrame,
        document_ids: Optional[Iterable[int]] = None
    ) -> DocumentTermMatrix:
        """
        Build the document-term matrix.

        Args:
            counts: Table with doc_id, term, count
            document_ids: Every document id that entered preprocessing; used
                to detect documents left with no terms

        Returns:
            DocumentTermMatrix with raw counts

        Raises:
            EmptyDocumentError: Under the "error" policy, if any document
                has no surviving terms
            ValueError: If counts reference documents outside document_ids
        """
        terms = sorted(counts["term"].unique())
        present = sorted({int(d) for d in counts["doc_id"].unique()})

        if document_ids is None:
            universe = present
        else:
            universe = sorted({int(d) for d in document_ids})
            unknown = set(present) - set(universe)
            if unknown:
                raise ValueError(f"Counts reference unknown documents: {sorted(unknown)[:10]}")

        empty_doc_ids = sorted(set(universe) - set(present))
        if empty_doc_ids:
            logger.warning(
                f"{len(empty_doc_ids)} documents have no surviving terms "
                f"(policy: {self.empty_document_policy})"
            )
            if self.empty_document_policy == "error":
                raise EmptyDocumentError(empty_doc_ids)

        doc_ids = universe if self.empty_document_policy == "keep" else present

        row_index = {doc_id: i for i, doc_id in enumerate(doc_ids)}
        column_index = {term: j for j, term in enumerate(terms)}

        rows = np.array([row_index[int(d)] for d in counts["doc_id"]], dtype=np.int64)
        cols = np.array([column_index[t] for t in counts["term"]], dtype=np.int64)
        data = counts["count"].to_numpy(dtype=np.int64)

        matrix = sparse.csr_matrix(
            (data, (rows, cols)),
            shape=(len(doc_ids), len(terms)),
            dtype=np.int64
        )
        matrix.sum_duplicates()
        matrix.sort_indices()

        logger.info(
            f"Built {matrix.shape[0]} x {matrix.shape[1]} document-term matrix "
            f"with {matrix.nnz} nonzero cells"
        )

        return DocumentTermMatrix(
            matrix=matrix,
            doc_ids=doc_ids,
            terms=terms,
            empty_doc_ids=empty_doc_ids,
            empty_document_policy=self.empty_document_policy
        )
