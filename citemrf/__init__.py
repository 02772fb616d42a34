"""
citemrf - classification of citation context sentences.

Sentences of papers citing a given work are labelled as references to it
or not using loopy belief propagation on a Markov random field built over
neighbouring sentences.
"""

__version__ = "1.0.0"

from .core.classifier import MRFClassifier
from .core.dataset_loader import DatasetLoader
from .core.lexicon import Lexicon
from .models.document import Dataset, DatasetContext, Document, Sentence, SentenceType
from .models.result import ClassificationResult, CorpusResult, DocumentResult
from .utils.config import Config, MRFParams

__all__ = [
    "MRFClassifier",
    "DatasetLoader",
    "Lexicon",
    "Dataset",
    "DatasetContext",
    "Document",
    "Sentence",
    "SentenceType",
    "ClassificationResult",
    "CorpusResult",
    "DocumentResult",
    "Config",
    "MRFParams",
]
