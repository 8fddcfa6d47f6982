"""
ReviewLDA - topic analysis of customer reviews.

Turns raw review records into a bounded-vocabulary document-term matrix
and hands it to a topic model.
"""

__version__ = "0.1.0"
