"""
Prior ("self") beliefs of citing sentences.

A sentence's self belief is the probability that it refers to the cited
work judged from its own text only, before any neighbour influence.
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional

import numpy as np

from .lexicon import Lexicon
from .probability import min_max_scale
from ..models.document import DatasetContext, Document, Sentence
from ..utils.config import MRFParams
from ..utils.exceptions import InferenceError


log = logging.getLogger(__name__)

TITLE_SIMILARITY_WEIGHT = 2.0
CONTENT_SIMILARITY_WEIGHT = 1.0


class SelfBeliefEstimator:
    """
    Computes per-sentence priors from textual cues.

    The unnormalized score adds up weighted indicators (author mention,
    acronym, lexical hook, section header) and the normalized similarity to
    the cited work. Scores are then min-max scaled over the non-explicit
    sentences of the document and clamped to a floor; explicit references
    are pinned to (0, 1).
    """

    def __init__(self, params: MRFParams, lexicon: Lexicon) -> None:
        self.params = params
        self.lexicon = lexicon

    def similarities(self, document: Document, context: DatasetContext,
                     diagnostics: Optional[List[str]] = None) -> List[float]:
        """Similarity of each sentence to the cited work, min-max scaled over the document."""
        raw = [
            CONTENT_SIMILARITY_WEIGHT * s.text.similarity(context.cited_content)
            + TITLE_SIMILARITY_WEIGHT * s.text.similarity(context.cited_title)
            for s in document.sentences
        ]
        for idx, value in enumerate(raw):
            if math.isnan(value):
                raise InferenceError("Similarity to cited work is NaN", idx)
        scaled, degenerate = min_max_scale(raw)
        if degenerate and raw:
            _diagnose(diagnostics, f"similarity to cited work is constant ({raw[0]:.4f}), using 0.5")
        return scaled

    def score(self, sentence: Sentence, context: DatasetContext, similarity: float) -> float:
        """Unnormalized prior score of one sentence."""
        words = sentence.text.words
        p = self.params
        score = similarity
        if self.lexicon.contains_main_author(words, context.cited_main_author):
            score += p.author_weight
        if self.lexicon.contains_acronyms(words, context.acronyms):
            score += p.acronym_weight
        if self.lexicon.contains_lexical_hooks(sentence.text.raw, context.lexical_hooks):
            score += p.hooks_weight
        if self.lexicon.starts_with_section_header(words):
            score += p.header_weight
        return score

    def estimate(self, document: Document, context: DatasetContext,
                 diagnostics: Optional[List[str]] = None) -> List[np.ndarray]:
        """
        Compute one (not-ref, ref) prior per sentence.

        Raises:
            InferenceError: If a score is NaN
        """
        similarities = self.similarities(document, context, diagnostics)

        scores = []
        for sentence, similarity in zip(document.sentences, similarities):
            value = self.score(sentence, context, similarity)
            if math.isnan(value):
                raise InferenceError("Self belief score is NaN", sentence.idx,
                                     f"similarity={similarity}")
            scores.append(value)

        # explicit references must not stretch the range of the others
        include = [not s.is_explicit for s in document.sentences]
        normalized, degenerate = min_max_scale(scores, include=include)
        # a single non-explicit sentence is a degenerate range too
        if degenerate and any(include):
            _diagnose(diagnostics, "self belief scores are constant, using 0.5")

        beliefs = []
        for sentence, value in zip(document.sentences, normalized):
            if sentence.is_explicit:
                value = 1.0
            else:
                value = max(value, self.params.min_self_belief)
            beliefs.append(np.array([1.0 - value, value]))

        if any(np.isnan(b).any() for b in beliefs):
            raise InferenceError("Self belief is NaN after normalization")
        return beliefs


def _diagnose(diagnostics: Optional[List[str]], message: str) -> None:
    log.warning(message)
    if diagnostics is not None:
        diagnostics.append(message)
