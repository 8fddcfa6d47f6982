"""
Shared fixtures.

Tests never touch the network or downloaded NLTK corpora: the lemmatizer
used here is a small dictionary lookup.
"""

import pytest

from reviewlda.stages.tokenizer import Lemmatizer

TOY_LEMMAS = {
    "drinks": "drink",
    "ordered": "order",
    "ordering": "order",
    "services": "service",
    "baristas": "barista",
    "was": "be",
    "is": "be",
}


@pytest.fixture
def lemmatizer():
    """Dictionary lemmatizer; unknown words are their own lemma."""
    return Lemmatizer(base=lambda word: TOY_LEMMAS.get(word, word))
