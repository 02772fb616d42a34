"""
Data models for citemrf.

This package contains the document, dataset and result models
used throughout the classifier.
"""

from .document import Dataset, DatasetContext, Document, Sentence, SentenceType, TextFeatures
from .result import ClassificationResult, CorpusResult, DocumentResult

__all__ = [
    "Dataset",
    "DatasetContext",
    "Document",
    "Sentence",
    "SentenceType",
    "TextFeatures",
    "ClassificationResult",
    "CorpusResult",
    "DocumentResult",
]
