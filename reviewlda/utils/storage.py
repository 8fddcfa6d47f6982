"""
Storage utility.

Dataset download plus file I/O for the document-term matrix and topic
summaries.
"""

import json
import os
import logging
from typing import Dict, Optional

import pandas as pd
import requests
from scipy import sparse

from reviewlda.exceptions import DatasetError
from reviewlda.models.matrix import DocumentTermMatrix

logger = logging.getLogger(__name__)


class StorageManager:
    """
    Manages file I/O for all pipeline inputs and outputs.

    Handles:
    - Raw datasets (data/raw/<filename>)
    - Document-term matrices (data/matrix/<name>.npz + <name>.json)
    - Topic summaries (output/<name>_*.csv + <name>_metadata.json)
    """

    def __init__(self, data_root: str, output_root: str, timeout_seconds: int = 60):
        """
        Initialize storage manager.

        Args:
            data_root: Root data directory (e.g., /path/to/data)
            output_root: Directory for summary tables
            timeout_seconds: HTTP timeout for dataset downloads
        """
        self.data_root = str(data_root)
        self.output_root = str(output_root)
        self.timeout_seconds = timeout_seconds
        self.raw_dir = os.path.join(self.data_root, "raw")
        self.matrix_dir = os.path.join(self.data_root, "matrix")

        # Create directories if they don't exist
        os.makedirs(self.raw_dir, exist_ok=True)
        os.makedirs(self.matrix_dir, exist_ok=True)
        os.makedirs(self.output_root, exist_ok=True)

        logger.info(f"Initialized StorageManager with data_root={self.data_root}")

    def fetch_dataset(self, url: str, filename: str, force: bool = False) -> str:
        """
        Download a dataset into the raw directory.

        A cached file is reused only if it was downloaded from the same URL;
        the source URL is recorded next to it in <filename>.url.

        Args:
            url: HTTP(S) location of the CSV
            filename: Local file name under data/raw
            force: Download even if the file is already cached

        Returns:
            Local file path

        Raises:
            DatasetError: If the download fails
        """
        filepath = os.path.join(self.raw_dir, filename)
        source_path = f"{filepath}.url"

        if os.path.exists(filepath) and not force:
            cached_url = self._cached_source(source_path)
            if not url or cached_url == url:
                logger.info(f"Using cached dataset {filepath}")
                return filepath
            logger.info(f"Cached dataset came from {cached_url}; downloading {url}")

        if not url:
            raise DatasetError("No dataset URL configured (set REVIEWLDA_DATASET_URL or pass --url)")

        logger.info(f"Downloading dataset from {url}")
        try:
            response = requests.get(url, timeout=self.timeout_seconds)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"Failed to download dataset from {url}: {e}")
            raise DatasetError(f"Cannot download dataset from {url}: {e}") from e

        partial_path = f"{filepath}.part"
        try:
            with open(partial_path, 'wb') as f:
                f.write(response.content)
            os.replace(partial_path, filepath)
            with open(source_path, 'w') as f:
                f.write(url)
        except OSError as e:
            logger.error(f"Failed to write dataset to {filepath}: {e}")
            if os.path.exists(partial_path):
                os.remove(partial_path)
            raise DatasetError(f"Cannot write dataset to {filepath}: {e}") from e

        logger.info(f"Saved {len(response.content)} bytes to {filepath}")
        return filepath

    @staticmethod
    def _cached_source(source_path: str) -> Optional[str]:
        """URL a cached dataset was downloaded from, if recorded."""
        if not os.path.exists(source_path):
            return None
        with open(source_path, 'r') as f:
            return f.read().strip()

    def save_matrix(self, dtm: DocumentTermMatrix, name: str = "dtm") -> str:
        """
        Save a document-term matrix and its row/column mappings.

        Returns:
            Path to the .npz file
        """
        matrix_path = os.path.join(self.matrix_dir, f"{name}.npz")
        metadata_path = os.path.join(self.matrix_dir, f"{name}.json")

        try:
            sparse.save_npz(matrix_path, dtm.matrix)
            with open(metadata_path, 'w') as f:
                json.dump(dtm.metadata(), f, indent=2)
            logger.info(f"Saved {dtm.shape[0]} x {dtm.shape[1]} matrix to {matrix_path}")
        except Exception as e:
            logger.error(f"Failed to save matrix {name}: {e}")
            raise

        return matrix_path

    def load_matrix(self, name: str = "dtm") -> Optional[DocumentTermMatrix]:
        """
        Load a saved document-term matrix.

        Returns:
            DocumentTermMatrix, or None if it was never saved
        """
        matrix_path = os.path.join(self.matrix_dir, f"{name}.npz")
        metadata_path = os.path.join(self.matrix_dir, f"{name}.json")

        if not (os.path.exists(matrix_path) and os.path.exists(metadata_path)):
            logger.warning(f"No saved matrix named {name}")
            return None

        with open(metadata_path, 'r') as f:
            metadata = json.load(f)

        return DocumentTermMatrix(
            matrix=sparse.load_npz(matrix_path).tocsr(),
            doc_ids=metadata["doc_ids"],
            terms=metadata["terms"],
            empty_doc_ids=metadata.get("empty_doc_ids", []),
            empty_document_policy=metadata.get("empty_document_policy", "drop")
        )

    def save_summaries(
        self,
        summaries: pd.DataFrame,
        assignments: pd.DataFrame,
        rating_profile: pd.DataFrame,
        metadata: Dict,
        name: str = "topics"
    ) -> str:
        """
        Save topic summaries, document assignments and run metadata.

        Returns:
            Path to the summary CSV
        """
        summary_path = os.path.join(self.output_root, f"{name}_summary.csv")
        assignments_path = os.path.join(self.output_root, f"{name}_assignments.csv")
        profile_path = os.path.join(self.output_root, f"{name}_ratings.csv")
        metadata_path = os.path.join(self.output_root, f"{name}_metadata.json")

        try:
            summaries.to_csv(summary_path, index=False)
            assignments.to_csv(assignments_path, index=False)
            rating_profile.to_csv(profile_path)
            with open(metadata_path, 'w') as f:
                json.dump(metadata, f, indent=2)
        except Exception as e:
            logger.error(f"Failed to save summaries {name}: {e}")
            raise

        logger.info(f"Topic summary saved to {summary_path}")
        return summary_path
