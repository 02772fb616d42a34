"""
Pairwise relatedness of sentences and the compatibility potentials built on it.
"""

from __future__ import annotations

import logging
import math
from typing import Dict, Iterator, List, Optional, Tuple

import numpy as np

from .lexicon import Lexicon
from .probability import NO, min_max_scale, sigmoid, uniform
from ..models.document import Document
from ..utils.exceptions import InferenceError


log = logging.getLogger(__name__)

CONNECTOR_BONUS = 4.0
DET_WORK_BONUS = 3.0
PRONOUN_BONUS = 2.0
DETERMINER_BONUS = 1.5
ADJACENCY_BONUS = 1.0

Pair = Tuple[int, int]


def window_pairs(num_sentences: int, neighbourhood: int) -> Iterator[Pair]:
    """Unordered pairs (i, j), i < j, with j - i <= neighbourhood."""
    for i in range(num_sentences):
        for j in range(i + 1, min(num_sentences, i + neighbourhood + 1)):
            yield i, j


class RelatednessModel:
    """
    Symmetric relatedness between two positions of one document.

    relatedness(i, j) is the text similarity of the two sentences, min-max
    scaled over every edge of the windowed graph, plus a bonus for adjacent
    sentences chosen by how the later sentence opens. Results are memoized
    per unordered pair; a missing key means "not computed yet", so a
    relatedness of exactly 0.0 is cached like any other value.

    One instance serves a single inference run and must not be shared
    between documents.
    """

    def __init__(self, document: Document, lexicon: Lexicon, neighbourhood: int,
                 diagnostics: Optional[List[str]] = None) -> None:
        self.document = document
        self.lexicon = lexicon
        self.neighbourhood = neighbourhood
        self._cache: Dict[Pair, float] = {}
        self._normalized_similarity = self._normalize_edge_similarities(diagnostics)

    def _normalize_edge_similarities(self, diagnostics: Optional[List[str]]) -> Dict[Pair, float]:
        sentences = self.document.sentences
        pairs = list(window_pairs(len(sentences), self.neighbourhood))
        raw = [sentences[i].text.similarity(sentences[j].text) for i, j in pairs]
        for (i, j), value in zip(pairs, raw):
            if math.isnan(value):
                raise InferenceError("Neighbour similarity is NaN", i, f"pair=({i}, {j})")
        scaled, degenerate = min_max_scale(raw)
        if degenerate and pairs:
            message = "neighbour similarities are constant, using 0.5"
            log.warning(message)
            if diagnostics is not None:
                diagnostics.append(message)
        return dict(zip(pairs, scaled))

    def relatedness(self, i: int, j: int) -> float:
        key = (i, j) if i < j else (j, i)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        if key in self._normalized_similarity:
            value = self._normalized_similarity[key]
        else:
            # outside the window; only reachable through direct calls
            first, second = self.document.sentences[key[0]], self.document.sentences[key[1]]
            value = first.text.similarity(second.text)
            if math.isnan(value):
                raise InferenceError("Similarity is NaN", key[0], f"pair={key}")
        if key[1] - key[0] == 1:
            value += self.adjacency_bonus(key[1])
        self._cache[key] = value
        return value

    def adjacency_bonus(self, later: int) -> float:
        """Bonus for a sentence following its predecessor; only the first matching rule counts."""
        words = self.document.sentences[later].text.words
        if self.lexicon.starts_with_connector(words):
            return CONNECTOR_BONUS
        if self.lexicon.contains_det_work(words):
            return DET_WORK_BONUS
        if self.lexicon.starts_with_third_person_pronoun(words):
            return PRONOUN_BONUS
        if self.lexicon.starts_with_it(words) or self.lexicon.starts_with_determiner(words):
            return DETERMINER_BONUS
        return ADJACENCY_BONUS

    def compatibility(self, state: int, sender: int, receiver: int) -> np.ndarray:
        """
        Distribution over the receiver's state given the sender's state.

        A non-reference sender carries no preference. A reference sender
        pushes the receiver towards "reference" by sigmoid(relatedness).
        """
        if state == NO:
            return uniform()
        same = sigmoid(self.relatedness(sender, receiver))
        return np.array([1.0 - same, same])

    @property
    def cache_size(self) -> int:
        return len(self._cache)
