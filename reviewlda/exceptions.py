"""
Exceptions raised by the ReviewLDA pipeline.
"""


class DatasetError(RuntimeError):
    """Dataset could not be acquired or read. Always fatal."""


class DegenerateDistributionError(ValueError):
    """IDF distribution is empty or too narrow to prune against."""


class EmptyDocumentError(ValueError):
    """Documents with no surviving terms reached the matrix builder."""

    def __init__(self, doc_ids):
        self.doc_ids = list(doc_ids)
        preview = ", ".join(str(d) for d in self.doc_ids[:10])
        super().__init__(
            f"{len(self.doc_ids)} documents have no surviving terms: {preview}"
        )
