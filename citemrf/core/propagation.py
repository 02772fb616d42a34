"""
Loopy belief propagation over the windowed sentence graph.

Nodes are sentence positions; an edge joins i and j when 0 < |i - j| <= k
for the configured neighbourhood k. Messages are (not-ref, ref) vectors on
directed edges and are updated synchronously: every sweep reads only the
messages of the previous sweep and writes a fresh buffer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import numpy as np

from .lexicon import Lexicon
from .probability import NO, YES, normalize, uniform
from .relatedness import RelatednessModel
from ..models.document import Document
from ..utils.config import MRFParams
from ..utils.exceptions import ValidationError


log = logging.getLogger(__name__)

Edge = Tuple[int, int]


@dataclass
class PropagationResult:
    """
    Outcome of one inference run.

    Attributes:
        final_beliefs: Marginal (not-ref, ref) belief per sentence
        iterations: Sweeps executed, never more than the budget
        converged: True if the last sweep changed no message by more than delta
        messages: Final message per directed edge (sender, receiver)
    """
    final_beliefs: List[np.ndarray]
    iterations: int
    converged: bool
    messages: Dict[Edge, np.ndarray] = field(default_factory=dict)


def neighbours(num_sentences: int, neighbourhood: int) -> List[List[int]]:
    """Neighbour positions of every node in the windowed graph."""
    return [
        [j for j in range(max(0, i - neighbourhood), min(num_sentences, i + neighbourhood + 1)) if j != i]
        for i in range(num_sentences)
    ]


class BeliefPropagationEngine:
    """
    Runs loopy belief propagation for a single document.

    The engine holds only immutable parameters and the shared lexicon;
    every call to ``run`` builds its own graph, relatedness cache and
    message buffers, so one engine can serve documents concurrently.
    """

    def __init__(self, params: MRFParams, lexicon: Lexicon) -> None:
        self.params = params
        self.lexicon = lexicon

    def run(self, document: Document, self_beliefs: List[np.ndarray],
            diagnostics: Optional[List[str]] = None) -> PropagationResult:
        """
        Propagate beliefs until no message changes or the iteration budget is spent.

        Args:
            document: The citing paper
            self_beliefs: Prior per sentence, aligned with ``document.sentences``
            diagnostics: Optional list collecting recovered degenerate cases
        """
        n = len(document)
        if len(self_beliefs) != n:
            raise ValidationError("Need one self belief per sentence", "self_beliefs",
                                  f"{len(self_beliefs)} != {n}")

        graph = neighbours(n, self.params.neighbourhood)
        messages = self.init_messages(graph)
        if not messages:
            log.debug("No edges in graph; final beliefs equal self beliefs")
            return PropagationResult([np.array(b, dtype=float) for b in self_beliefs], 0, True)

        relatedness = RelatednessModel(document, self.lexicon, self.params.neighbourhood, diagnostics)

        iterations = 0
        converged = False
        for _ in range(self.params.max_iterations):
            messages, changed = self.sweep(graph, messages, self_beliefs, relatedness, diagnostics)
            iterations += 1
            log.debug(f"Sweep {iterations}: changed={changed}")
            if not changed:
                converged = True
                break

        log.debug(f"Propagation finished after {iterations} sweeps (converged={converged}, "
                  f"{len(messages)} messages, {relatedness.cache_size} cached pairs)")
        final = [self.final_belief(node, graph, messages, self_beliefs, diagnostics) for node in range(n)]
        return PropagationResult(final, iterations, converged, messages)

    @staticmethod
    def init_messages(graph: List[List[int]]) -> Dict[Edge, np.ndarray]:
        return {(sender, receiver): uniform() for sender, targets in enumerate(graph) for receiver in targets}

    def sweep(self, graph: List[List[int]], messages: Dict[Edge, np.ndarray],
              self_beliefs: List[np.ndarray], relatedness: RelatednessModel,
              diagnostics: Optional[List[str]] = None) -> Tuple[Dict[Edge, np.ndarray], bool]:
        """
        Recompute every message from the previous buffer.

        Returns:
            The new message buffer and whether any message moved by more than delta
        """
        updated: Dict[Edge, np.ndarray] = {}
        changed = False
        for sender, targets in enumerate(graph):
            for receiver in targets:
                message = self.compute_message(sender, receiver, graph, messages,
                                               self_beliefs, relatedness, diagnostics)
                if np.any(np.abs(message - messages[(sender, receiver)]) > self.params.convergence_delta):
                    changed = True
                updated[(sender, receiver)] = message
        return updated, changed

    def compute_message(self, sender: int, receiver: int, graph: List[List[int]],
                        messages: Dict[Edge, np.ndarray], self_beliefs: List[np.ndarray],
                        relatedness: RelatednessModel,
                        diagnostics: Optional[List[str]] = None) -> np.ndarray:
        """Message from sender to receiver, ignoring what the receiver told the sender."""
        incoming = _product(messages[(other, sender)] for other in graph[sender] if other != receiver)
        belief = normalize(self_beliefs[sender] * incoming, diagnostics)
        message = (belief[NO] * relatedness.compatibility(NO, sender, receiver)
                   + belief[YES] * relatedness.compatibility(YES, sender, receiver))
        return normalize(message, diagnostics)

    @staticmethod
    def final_belief(node: int, graph: List[List[int]], messages: Dict[Edge, np.ndarray],
                     self_beliefs: List[np.ndarray], diagnostics: Optional[List[str]] = None) -> np.ndarray:
        incoming = _product(messages[(other, node)] for other in graph[node])
        return normalize(self_beliefs[node] * incoming, diagnostics)


def _product(vectors) -> np.ndarray:
    result = np.ones(2)
    for vector in vectors:
        result = result * vector
    return result
