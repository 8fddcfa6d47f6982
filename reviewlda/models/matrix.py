"""
Document-term matrix model.

Final artifact of preprocessing, handed to a topic model.
"""

from dataclasses import dataclass, field
from typing import Dict, List

from scipy import sparse


EMPTY_DOCUMENT_POLICIES = ("drop", "keep", "error")


@dataclass
class DocumentTermMatrix:
    """
    Sparse matrix of raw term counts.

    Rows follow doc_ids, columns follow terms. Documents that ended up with
    no surviving terms are listed in empty_doc_ids: under the "drop" policy
    they have no row, under "keep" they are all-zero rows.
    """
    matrix: sparse.csr_matrix
    doc_ids: List[int]
    terms: List[str]
    empty_doc_ids: List[int] = field(default_factory=list)
    empty_document_policy: str = "drop"

    def __post_init__(self):
        if self.empty_document_policy not in EMPTY_DOCUMENT_POLICIES:
            raise ValueError(
                f"Invalid empty document policy: {self.empty_document_policy}. "
                f"Must be one of {EMPTY_DOCUMENT_POLICIES}"
            )

        expected = (len(self.doc_ids), len(self.terms))
        if self.matrix.shape != expected:
            raise ValueError(f"Matrix shape {self.matrix.shape} does not match {expected}")

    @property
    def shape(self):
        return self.matrix.shape

    @property
    def row_index(self) -> Dict[int, int]:
        """Map document id to matrix row."""
        return {doc_id: i for i, doc_id in enumerate(self.doc_ids)}

    @property
    def column_index(self) -> Dict[str, int]:
        """Map term to matrix column."""
        return {term: j for j, term in enumerate(self.terms)}

    def has_empty_rows(self) -> bool:
        """True if any row has no nonzero entry."""
        return bool((self.matrix.getnnz(axis=1) == 0).any())

    def without_empty_rows(self) -> "DocumentTermMatrix":
        """Copy with all-zero rows removed, as the "drop" policy builds it."""
        nonempty = self.matrix.getnnz(axis=1) > 0
        return DocumentTermMatrix(
            matrix=self.matrix[nonempty],
            doc_ids=[d for d, keep in zip(self.doc_ids, nonempty) if keep],
            terms=list(self.terms),
            empty_doc_ids=list(self.empty_doc_ids),
            empty_document_policy="drop"
        )

    def count(self, doc_id: int, term: str) -> int:
        """Raw count of term in document (0 if absent)."""
        return int(self.matrix[self.row_index[doc_id], self.column_index[term]])

    def metadata(self) -> dict:
        """JSON-serializable description of rows and columns."""
        return {
            "doc_ids": [int(d) for d in self.doc_ids],
            "terms": list(self.terms),
            "empty_doc_ids": [int(d) for d in self.empty_doc_ids],
            "empty_document_policy": self.empty_document_policy,
            "shape": list(self.matrix.shape),
            "nonzero": int(self.matrix.nnz),
        }
