"""
Document data model.

Represents one review after loading and cleaning.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Document:
    """
    A cleaned review record.
    The identifier is assigned once at load time and never reassigned.
    """
    doc_id: int  # Raw row position in the source table
    text: str  # Cleaned review text
    rating: Optional[int] = None  # 1-5 star rating, None if absent or invalid
    date: Optional[str] = None  # YYYY-MM-DD format, None if unparseable
    location: Optional[str] = None
    length: int = 0  # Characters in cleaned text
    has_image: bool = False

    def __post_init__(self):
        # Validate rating
        if self.rating is not None and not (1 <= self.rating <= 5):
            raise ValueError(f"Invalid rating: {self.rating}. Must be 1-5 or None")

        if self.length != len(self.text):
            raise ValueError(
                f"Length {self.length} does not match text of {len(self.text)} characters"
            )
