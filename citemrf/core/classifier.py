"""
MRF classifier for citation context sentences.

This module ties the self belief estimator and the belief propagation
engine together, turns converged beliefs into predictions and keeps the
confusion-matrix accounting per document and per corpus.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence, Tuple

import numpy as np
from tqdm import tqdm

from .lexicon import Lexicon
from .probability import YES, as_pair
from .propagation import BeliefPropagationEngine
from .self_belief import SelfBeliefEstimator
from ..models.document import Dataset, DatasetContext, Document, SentenceType
from ..models.result import ClassificationResult, CorpusResult, DocumentResult
from ..utils.config import Config, MRFParams
from ..utils.exceptions import CiteMRFError, log_exception


log = logging.getLogger(__name__)


class MRFClassifier:
    """
    Classifies the sentences of citing papers as references or not.

    Each document is processed independently: priors from textual cues,
    loopy belief propagation across neighbouring sentences, then a
    threshold gated by proximity to an explicit reference.

    Attributes:
        config: Application configuration
        params: Validated inference parameters
        lexicon: Shared read-only lexicon
    """

    def __init__(self, config: Optional[Config] = None, lexicon: Optional[Lexicon] = None,
                 params: Optional[MRFParams] = None) -> None:
        """
        Initialize the classifier.

        Args:
            config: Optional configuration object
            lexicon: Optional lexicon; the configured one is loaded otherwise
            params: Optional parameters overriding the configuration

        Raises:
            ConfigurationError: If the configuration is invalid
        """
        self.config = config or Config()
        self.params = params or self.config.get_mrf_params()
        self.lexicon = lexicon or Lexicon.from_config(self.config.get_lexicon_config().get("wordlist_dir"))
        self.self_belief_estimator = SelfBeliefEstimator(self.params, self.lexicon)
        self.engine = BeliefPropagationEngine(self.params, self.lexicon)

        log.info(f"MRF classifier initialized (neighbourhood={self.params.neighbourhood}, "
                 f"threshold={self.params.belief_threshold})")

    def classify_document(self, document: Document, context: DatasetContext,
                          index: int = 0) -> DocumentResult:
        """
        Run inference on one citing paper and score the predictions.

        Raises:
            InferenceError: If a self belief turns out NaN
        """
        start = time.perf_counter()
        diagnostics: List[str] = []

        self_beliefs = self.self_belief_estimator.estimate(document, context, diagnostics)
        propagation = self.engine.run(document, self_beliefs, diagnostics)
        predictions = self.predict(document, propagation.final_beliefs)
        millis = (time.perf_counter() - start) * 1000.0
        result = self.score(document, predictions, millis)

        log.debug(f"Document {index}: {len(document)} sentences, {propagation.iterations} sweeps, "
                  f"TP={result.true_positives} FP={result.false_positives} "
                  f"TN={result.true_negatives} FN={result.false_negatives}")

        return DocumentResult(
            index=index,
            result=result,
            self_beliefs=[as_pair(b) for b in self_beliefs],
            final_beliefs=[as_pair(b) for b in propagation.final_beliefs],
            predictions=predictions,
            iterations=propagation.iterations,
            converged=propagation.converged,
            diagnostics=diagnostics,
        )

    def predict(self, document: Document, final_beliefs: Sequence[np.ndarray]) -> List[bool]:
        """A sentence is a reference if its belief exceeds the threshold near an explicit reference."""
        explicit = document.explicit_indices()
        return [
            bool(belief[YES] > self.params.belief_threshold)
            and is_close_to_explicit(i, explicit, self.params.context_window)
            for i, belief in enumerate(final_beliefs)
        ]

    @staticmethod
    def score(document: Document, predictions: Sequence[bool], millis: float = 0.0) -> ClassificationResult:
        """
        Confusion matrix of predictions against the labels.

        Explicit references are known beforehand and are not counted.
        """
        result = ClassificationResult(millis=millis)
        for sentence, predicted in zip(document.sentences, predictions):
            if sentence.type is SentenceType.EXPLICIT_REFERENCE:
                continue
            actual = sentence.type is SentenceType.IMPLICIT_REFERENCE
            if predicted and actual:
                result.true_positives += 1
            elif predicted:
                result.false_positives += 1
                result.fp_indices.append(sentence.idx)
            elif actual:
                result.false_negatives += 1
                result.fn_indices.append(sentence.idx)
            else:
                result.true_negatives += 1
        return result

    def classify(self, dataset: Dataset) -> CorpusResult:
        """
        Classify every citing paper of a dataset.

        Documents are independent and may run in parallel. A document whose
        inference fails is logged and recorded under ``failures``; the
        others are still aggregated.
        """
        processing = self.config.get_processing_config()
        workers = int(processing.get("max_workers", 1))
        parallel = bool(processing.get("enable_parallel", True)) and workers > 1 and len(dataset.citers) > 1
        show_progress = bool(processing.get("show_progress", True))

        log.info(f"Classifying {len(dataset.citers)} citers of {dataset.label} "
                 f"(acronyms: {sorted(dataset.context.acronyms)}, hooks: {sorted(dataset.context.lexical_hooks)})")

        jobs = list(enumerate(dataset.citers))
        progress = tqdm(total=len(jobs), desc=f"MRF {dataset.label}", unit="citer", disable=not show_progress)
        try:
            if parallel:
                with ThreadPoolExecutor(max_workers=workers) as executor:
                    outcomes = []
                    for outcome in executor.map(lambda job: self._safe_classify(job, dataset.context), jobs):
                        outcomes.append(outcome)
                        progress.update(1)
            else:
                outcomes = []
                for job in jobs:
                    outcomes.append(self._safe_classify(job, dataset.context))
                    progress.update(1)
        finally:
            progress.close()

        corpus = CorpusResult(label=dataset.label)
        for index, document_result, error in outcomes:
            if document_result is not None:
                corpus.documents.append(document_result)
            else:
                corpus.failures[index] = error

        totals = corpus.totals
        log.info(f"{dataset.label}: P={totals.precision:.3f} R={totals.recall:.3f} "
                 f"F1={totals.f_score():.3f} ({len(corpus.failures)} failed)")
        return corpus

    def classify_all(self, datasets: Sequence[Dataset]) -> List[CorpusResult]:
        return [self.classify(dataset) for dataset in datasets]

    def _safe_classify(self, job: Tuple[int, Document],
                       context: DatasetContext) -> Tuple[int, Optional[DocumentResult], str]:
        index, document = job
        try:
            return index, self.classify_document(document, context, index), ""
        except CiteMRFError as e:
            log_exception(log, e, f"Document {index} skipped")
            return index, None, str(e)


def is_close_to_explicit(index: int, explicit_indices: Sequence[int], window: int) -> bool:
    """True if an explicit reference lies within ``window`` positions of ``index``."""
    return any(abs(index - e) <= window for e in explicit_indices)
