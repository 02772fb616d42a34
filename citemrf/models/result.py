"""
Result models for citemrf.

This module defines the confusion-matrix accounting produced by the
classifier, per document and aggregated over a corpus.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple


Belief = Tuple[float, float]


@dataclass
class ClassificationResult:
    """
    Confusion matrix counts with diagnostics and timing.

    Attributes:
        true_positives: Implicit references predicted as references
        false_positives: Non-references predicted as references
        true_negatives: Non-references predicted as non-references
        false_negatives: Implicit references that were missed
        fp_indices: Sentence positions of the false positives
        fn_indices: Sentence positions of the false negatives
        millis: Wall-clock time spent, in milliseconds
    """
    true_positives: int = 0
    false_positives: int = 0
    true_negatives: int = 0
    false_negatives: int = 0
    fp_indices: List[int] = field(default_factory=list)
    fn_indices: List[int] = field(default_factory=list)
    millis: float = 0.0

    def __post_init__(self) -> None:
        """Validate counts."""
        for name in ("true_positives", "false_positives", "true_negatives", "false_negatives"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative")

    def add(self, other: ClassificationResult) -> ClassificationResult:
        """Accumulate another result into this one and return self."""
        self.true_positives += other.true_positives
        self.false_positives += other.false_positives
        self.true_negatives += other.true_negatives
        self.false_negatives += other.false_negatives
        self.fp_indices.extend(other.fp_indices)
        self.fn_indices.extend(other.fn_indices)
        self.millis += other.millis
        return self

    def __add__(self, other: ClassificationResult) -> ClassificationResult:
        combined = ClassificationResult(fp_indices=[], fn_indices=[])
        combined.add(self)
        combined.add(other)
        return combined

    @property
    def total(self) -> int:
        return self.true_positives + self.false_positives + self.true_negatives + self.false_negatives

    @property
    def precision(self) -> float:
        predicted = self.true_positives + self.false_positives
        return self.true_positives / predicted if predicted else 0.0

    @property
    def recall(self) -> float:
        actual = self.true_positives + self.false_negatives
        return self.true_positives / actual if actual else 0.0

    @property
    def accuracy(self) -> float:
        total = self.total
        return (self.true_positives + self.true_negatives) / total if total else 0.0

    def f_score(self, beta: float = 1.0) -> float:
        """
        Weighted harmonic mean of precision and recall.

        Args:
            beta: Recall is considered beta times as important as precision
        """
        p, r = self.precision, self.recall
        denominator = beta * beta * p + r
        if denominator == 0:
            return 0.0
        return (1 + beta * beta) * p * r / denominator

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "true_positives": self.true_positives,
            "false_positives": self.false_positives,
            "true_negatives": self.true_negatives,
            "false_negatives": self.false_negatives,
            "fp_indices": list(self.fp_indices),
            "fn_indices": list(self.fn_indices),
            "precision": round(self.precision, 4),
            "recall": round(self.recall, 4),
            "f1": round(self.f_score(), 4),
            "millis": round(self.millis, 3),
        }


@dataclass
class DocumentResult:
    """
    Outcome of classifying one citing paper.

    Attributes:
        index: Position of the document in its dataset
        result: Confusion matrix for the document
        self_beliefs: Prior (not-ref, ref) beliefs per sentence
        final_beliefs: Marginal beliefs after propagation per sentence
        predictions: Predicted "is reference" flag per sentence
        iterations: Number of sweeps executed
        converged: Whether a sweep finished with no message change
        diagnostics: Recovered degenerate cases worth reporting
    """
    index: int
    result: ClassificationResult
    self_beliefs: List[Belief] = field(default_factory=list)
    final_beliefs: List[Belief] = field(default_factory=list)
    predictions: List[bool] = field(default_factory=list)
    iterations: int = 0
    converged: bool = False
    diagnostics: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "index": self.index,
            "result": self.result.to_dict(),
            "self_beliefs": [round(b[1], 4) for b in self.self_beliefs],
            "final_beliefs": [round(b[1], 4) for b in self.final_beliefs],
            "predictions": list(self.predictions),
            "iterations": self.iterations,
            "converged": self.converged,
            "diagnostics": list(self.diagnostics),
        }


@dataclass
class CorpusResult:
    """
    Results of classifying every citing paper of a dataset.

    Attributes:
        label: Dataset identifier
        documents: Successful per-document results, ordered by index
        failures: Messages of documents whose classification aborted
    """
    label: str
    documents: List[DocumentResult] = field(default_factory=list)
    failures: Dict[int, str] = field(default_factory=dict)

    @property
    def totals(self) -> ClassificationResult:
        """Counts added up over all successful documents."""
        total = ClassificationResult(fp_indices=[], fn_indices=[])
        for doc in self.documents:
            total.add(doc.result)
        return total

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "label": self.label,
            "totals": self.totals.to_dict(),
            "documents": [d.to_dict() for d in self.documents],
            "failures": {str(k): v for k, v in self.failures.items()},
        }
