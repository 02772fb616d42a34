"""
Text representations for citing sentences and cited works.

Two representations implement the TextFeatures interface: a plain bag of
words and TF-IDF weighted n-grams. The variant is chosen once, when a
dataset is loaded, through a text factory.
"""

from __future__ import annotations

import logging
import math
from collections import Counter
from typing import Any, Dict, List, Optional, Sequence

from sklearn.feature_extraction.text import TfidfVectorizer
from sklearn.metrics.pairwise import cosine_similarity

from .lexicon import Lexicon, clean_word
from ..utils.exceptions import ConfigurationError, ProcessingError


log = logging.getLogger(__name__)

REPRESENTATIONS = ("tfidf", "bag_of_words")


def tokenize(text: str) -> List[str]:
    """Split on whitespace, keeping punctuation attached to tokens."""
    return text.split()


class BagOfWordsText:
    """Lower-cased unigram counts without stopwords, compared by cosine."""

    def __init__(self, raw: str, lexicon: Lexicon) -> None:
        self.raw = raw
        self._words = tokenize(raw)
        counts: Counter = Counter()
        for word in self._words:
            token = clean_word(word).lower()
            if token and any(c.isalnum() for c in token) and token not in lexicon.stopwords:
                counts[token] += 1
        self.counts = counts
        self._norm = math.sqrt(sum(v * v for v in counts.values()))

    @property
    def words(self) -> List[str]:
        return self._words

    def similarity(self, other: BagOfWordsText) -> float:
        if not isinstance(other, BagOfWordsText):
            raise TypeError(f"Cannot compare BagOfWordsText with {type(other).__name__}")
        if not self._norm or not other._norm:
            return 0.0
        small, large = sorted((self.counts, other.counts), key=len)
        dot = sum(v * large.get(k, 0) for k, v in small.items())
        return min(1.0, dot / (self._norm * other._norm))

    def __repr__(self) -> str:
        return f"BagOfWordsText({self.raw[:40]!r})"


class TfidfText:
    """A single sparse TF-IDF row produced by a fitted vectorizer."""

    def __init__(self, raw: str, vector: Any) -> None:
        self.raw = raw
        self._words = tokenize(raw)
        self.vector = vector

    @property
    def words(self) -> List[str]:
        return self._words

    def similarity(self, other: TfidfText) -> float:
        if not isinstance(other, TfidfText):
            raise TypeError(f"Cannot compare TfidfText with {type(other).__name__}")
        if self.vector.nnz == 0 or other.vector.nnz == 0:
            return 0.0
        sim = cosine_similarity(self.vector, other.vector)[0, 0]
        return float(max(0.0, min(1.0, sim)))

    def __repr__(self) -> str:
        return f"TfidfText({self.raw[:40]!r}, nnz={self.vector.nnz})"


class BagOfWordsFactory:
    """Builds BagOfWordsText values; needs no fitting."""

    name = "bag_of_words"

    def __init__(self, lexicon: Lexicon) -> None:
        self.lexicon = lexicon

    def fit(self, corpus: Sequence[str]) -> BagOfWordsFactory:
        return self

    def make_all(self, texts: Sequence[str]) -> List[BagOfWordsText]:
        return [BagOfWordsText(t, self.lexicon) for t in texts]


class TfidfFactory:
    """
    Fits a scikit-learn TfidfVectorizer on a dataset and builds TfidfText values.

    The vectorizer must be fitted on every text of the dataset (citing
    sentences and cited title/content) so IDF weights are shared.
    """

    name = "tfidf"

    def __init__(self, lexicon: Lexicon, ngram_range: Sequence[int] = (1, 2),
                 sublinear_tf: bool = True) -> None:
        self.vectorizer = TfidfVectorizer(
            lowercase=True,
            stop_words=sorted(lexicon.stopwords) or None,
            ngram_range=tuple(ngram_range),
            sublinear_tf=sublinear_tf,
        )
        self._fitted = False

    def fit(self, corpus: Sequence[str]) -> TfidfFactory:
        try:
            self.vectorizer.fit(list(corpus))
        except ValueError as e:
            raise ProcessingError("Failed to fit TF-IDF vocabulary", "tfidf_fit", str(e))
        self._fitted = True
        log.debug(f"TF-IDF vocabulary size: {len(self.vectorizer.vocabulary_)}")
        return self

    def make_all(self, texts: Sequence[str]) -> List[TfidfText]:
        if not self._fitted:
            raise ProcessingError("TF-IDF factory used before fitting", "tfidf_transform")
        if not texts:
            return []
        matrix = self.vectorizer.transform(list(texts)).tocsr()
        return [TfidfText(text, matrix[i]) for i, text in enumerate(texts)]


def create_text_factory(features_config: Dict[str, Any], lexicon: Lexicon,
                        representation: Optional[str] = None):
    """
    Select the text representation configured for a run.

    Args:
        features_config: The ``features`` configuration section
        lexicon: Shared lexicon (stopwords)
        representation: Optional override of ``features_config["representation"]``

    Raises:
        ConfigurationError: If the representation is unknown
    """
    name = representation or features_config.get("representation", "tfidf")
    if name == "tfidf":
        return TfidfFactory(
            lexicon,
            ngram_range=features_config.get("ngram_range", (1, 2)),
            sublinear_tf=bool(features_config.get("sublinear_tf", True)),
        )
    if name == "bag_of_words":
        return BagOfWordsFactory(lexicon)
    raise ConfigurationError(f"Unknown text representation. Valid: {list(REPRESENTATIONS)}",
                             "features.representation", str(name))
