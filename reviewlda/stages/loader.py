"""
Record Loader.

Reads raw review records into a normalized documents table and drops
records whose text is too short to be meaningful.
"""

import logging
import re
from dataclasses import asdict
from typing import Dict, Iterable, Optional

import pandas as pd

from reviewlda.exceptions import DatasetError
from reviewlda.models.document import Document

logger = logging.getLogger(__name__)

DOCUMENT_COLUMNS = ["doc_id", "text", "rating", "date", "location", "length", "has_image"]

# Raw column name (lowercase) for each recognized field
DEFAULT_COLUMN_MAP = {
    "text": "review",
    "rating": "rating",
    "date": "date",
    "location": "location",
    "images": "image_links",
}

_WHITESPACE = re.compile(r"\s+")
_MONTH_ABBREVIATION = re.compile(r"\b(Sept|[A-Z][a-z]{2})\.", re.IGNORECASE)


class RecordLoader:
    """
    Normalizes raw review records.

    Produces one row per retained review with an identifier assigned from
    the raw row position. Unparseable ratings and dates become absent
    rather than failing the record; only short text drops a record.
    """

    def __init__(
        self,
        min_review_length: int = 14,
        no_image_sentinel: str = "['No Images']",
        missing_text_sentinels: Iterable[str] = ("No Review Text Present",),
        column_map: Optional[Dict[str, str]] = None
    ):
        """
        Initialize record loader.

        Args:
            min_review_length: Reviews must be longer than this many characters
            no_image_sentinel: Image-links value meaning "no images"
            missing_text_sentinels: Review text values meaning "no text"
            column_map: Field name -> raw column name overrides
        """
        self.min_review_length = min_review_length
        self.no_image_sentinel = no_image_sentinel
        self.missing_text_sentinels = set(missing_text_sentinels)
        self.column_map = dict(DEFAULT_COLUMN_MAP)
        if column_map:
            self.column_map.update({k: v.lower() for k, v in column_map.items()})

        logger.info(f"Initialized RecordLoader with min_review_length={min_review_length}")

    @staticmethod
    def read_csv(path) -> pd.DataFrame:
        """
        Read a raw review CSV.

        Raises:
            DatasetError: If the file cannot be read
        """
        try:
            raw = pd.read_csv(path)
        except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
            logger.error(f"Failed to read dataset {path}: {e}")
            raise DatasetError(f"Cannot read dataset {path}: {e}") from e

        logger.info(f"Read {len(raw)} raw records from {path}")
        return raw

    def load_csv(self, path) -> pd.DataFrame:
        """Read a CSV file and load it."""
        return self.load(self.read_csv(path))

    def load(self, raw: pd.DataFrame) -> pd.DataFrame:
        """
        Build the documents table from raw records.

        Args:
            raw: Raw review table; never modified

        Returns:
            DataFrame with columns doc_id, text, rating, date, location,
            length, has_image

        Raises:
            DatasetError: If no review text column is present
        """
        columns = self._resolve_columns(raw)

        documents = []
        dropped = 0
        for position, record in enumerate(raw.to_dict("records")):
            document = self._parse_record(position, record, columns)
            if document.length <= self.min_review_length:
                logger.debug(f"Dropping record {position}: {document.length} characters")
                dropped += 1
                continue
            documents.append(document)

        if documents:
            table = pd.DataFrame([asdict(d) for d in documents], columns=DOCUMENT_COLUMNS)
        else:
            table = pd.DataFrame(columns=DOCUMENT_COLUMNS)
        for column in ("text", "date", "location"):
            # Absent values are None regardless of the inferred string dtype
            table[column] = table[column].astype(object).where(table[column].notna(), None)
        table["rating"] = table["rating"].astype("Int64")
        table["has_image"] = table["has_image"].astype(bool)

        logger.info(
            f"Loaded {len(table)} documents from {len(raw)} records "
            f"({dropped} dropped below {self.min_review_length + 1} characters)"
        )
        return table

    def _resolve_columns(self, raw: pd.DataFrame) -> Dict[str, Optional[str]]:
        """Map each field to the actual raw column name (case-insensitive)."""
        lookup = {str(col).lower(): col for col in raw.columns}
        columns = {field: lookup.get(name) for field, name in self.column_map.items()}

        if columns["text"] is None:
            raise DatasetError(
                f"Dataset has no review text column '{self.column_map['text']}' "
                f"(columns: {list(raw.columns)})"
            )

        missing = [field for field, col in columns.items() if col is None]
        if missing:
            logger.warning(f"Dataset is missing optional columns: {missing}")
        return columns

    def _parse_record(self, position: int, record: dict, columns: Dict[str, Optional[str]]) -> Document:
        def value(field):
            col = columns[field]
            return record.get(col) if col is not None else None

        text = self.clean_text(value("text"))
        location = value("location")

        return Document(
            doc_id=position,
            text=text,
            rating=self.parse_rating(value("rating")),
            date=self.parse_date(value("date")),
            location=None if pd.isna(location) else str(location).strip() or None,
            length=len(text),
            has_image=self.has_image(value("images"))
        )

    def clean_text(self, value) -> str:
        """Collapse whitespace; missing values and sentinels become empty."""
        if value is None or (not isinstance(value, str) and pd.isna(value)):
            return ""
        text = _WHITESPACE.sub(" ", str(value)).strip()
        if text in self.missing_text_sentinels:
            return ""
        return text

    @staticmethod
    def parse_rating(value) -> Optional[int]:
        """Integral rating in 1-5, otherwise None."""
        if value is None:
            return None
        rating = pd.to_numeric(value, errors="coerce")
        if pd.isna(rating) or not float(rating).is_integer():
            return None
        rating = int(rating)
        if not (1 <= rating <= 5):
            return None
        return rating

    @staticmethod
    def parse_date(value) -> Optional[str]:
        """
        Parse review timestamps like "Reviewed Sept. 13, 2023".

        Returns:
            YYYY-MM-DD string, or None if unparseable
        """
        if value is None or (not isinstance(value, str) and pd.isna(value)):
            return None
        text = str(value).strip()
        if text.lower().startswith("reviewed"):
            text = text[len("reviewed"):].strip()
        text = _MONTH_ABBREVIATION.sub(lambda m: m.group(1)[:3], text)
        if not text:
            return None

        try:
            parsed = pd.to_datetime(text, errors="coerce")
        except (ValueError, TypeError, OverflowError):
            parsed = pd.NaT
        if pd.isna(parsed):
            logger.debug(f"Unparseable date: {value!r}")
            return None
        return parsed.strftime("%Y-%m-%d")

    def has_image(self, value) -> bool:
        """True unless the image field is missing, blank or the sentinel."""
        if value is None or (not isinstance(value, str) and pd.isna(value)):
            return False
        text = str(value).strip()
        return bool(text) and text != self.no_image_sentinel and text != "[]"
