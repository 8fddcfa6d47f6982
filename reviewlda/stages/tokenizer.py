"""
Tokenizer and Lemmatizer.

Splits review text into lowercase word tokens and reduces each token to
its dictionary root.
"""

import logging
from typing import Callable, Dict, Iterator, List, NamedTuple, Optional

import nltk
import pandas as pd
from nltk.stem import WordNetLemmatizer
from nltk.tokenize import RegexpTokenizer

logger = logging.getLogger(__name__)

# Words with optional internal apostrophes ("don't", "starbucks's")
TOKEN_PATTERN = r"\w+(?:['’]\w+)*"


class Token(NamedTuple):
    doc_id: int
    word: str
    lemma: str


def ensure_wordnet() -> None:
    """Download the WordNet corpus if it is not already available."""
    for resource_path, package_name in (("corpora/wordnet", "wordnet"), ("corpora/omw-1.4", "omw-1.4")):
        try:
            nltk.data.find(resource_path)
        except LookupError:
            logger.info(f"Downloading NLTK resource '{package_name}'")
            nltk.download(package_name, quiet=True)


class WordNetLemma:
    """
    Maps a lowercase word to its WordNet root.

    Tries verb, noun and adjective readings in that order and returns the
    first one that changes the word.
    """

    POS_ORDER = ("v", "n", "a")

    def __init__(self, download: bool = True):
        if download:
            ensure_wordnet()
        self._lemmatizer = WordNetLemmatizer()

    def __call__(self, word: str) -> str:
        for pos in self.POS_ORDER:
            lemma = self._lemmatizer.lemmatize(word, pos=pos)
            if lemma != word:
                return lemma
        return word


class Lemmatizer:
    """
    Idempotent, memoized lemmatizer.

    Applies the base function until the word stops changing, so that
    lemmatizing a lemma always returns it unchanged. If the base function
    cycles, the lexicographically smallest word of the cycle is used.
    """

    def __init__(self, base: Optional[Callable[[str], str]] = None):
        self.base = base if base is not None else WordNetLemma()
        self._cache: Dict[str, str] = {}

    def __call__(self, word: str) -> str:
        cached = self._cache.get(word)
        if cached is not None:
            return cached

        seen = [word]
        current = word
        while True:
            following = self.base(current)
            if following == current:
                result = current
                break
            if following in seen:
                result = min(seen[seen.index(following):])
                break
            seen.append(following)
            current = following

        self._cache[word] = result
        self._cache[result] = result
        return result


class Tokenizer:
    """
    Produces one (document, word, lemma) token per word occurrence.

    Tokens are not deduplicated; downstream counting depends on raw
    multiplicity.
    """

    def __init__(self, lemmatizer: Optional[Callable[[str], str]] = None):
        """
        Initialize tokenizer.

        Args:
            lemmatizer: Pure function token -> lemma (default: WordNet)
        """
        self.lemmatizer = lemmatizer if lemmatizer is not None else Lemmatizer()
        self._splitter = RegexpTokenizer(TOKEN_PATTERN)

        logger.info(f"Initialized Tokenizer with lemmatizer={type(self.lemmatizer).__name__}")

    def split(self, text: str) -> List[str]:
        """Split text on word boundaries and lowercase it."""
        if not text:
            return []
        words = []
        for token in self._splitter.tokenize(text):
            token = token.replace("’", "'").lower()
            # "___" and similar fragments carry no letters or digits
            if not any(ch.isalnum() for ch in token):
                continue
            words.append(token)
        return words

    def tokenize(self, documents: pd.DataFrame) -> Iterator[Token]:
        """
        Lazily yield tokens for every document, in table order.

        Args:
            documents: Table with doc_id and text columns
        """
        for doc_id, text in zip(documents["doc_id"], documents["text"]):
            for word in self.split(text):
                yield Token(int(doc_id), word, self.lemmatizer(word))

    def to_frame(self, documents: pd.DataFrame) -> pd.DataFrame:
        """Materialize tokens as a DataFrame with doc_id, word, lemma."""
        table = pd.DataFrame(list(self.tokenize(documents)), columns=list(Token._fields))

        logger.info(
            f"Tokenized {len(documents)} documents into {len(table)} tokens "
            f"({table['lemma'].nunique()} distinct lemmas)"
        )
        return table
