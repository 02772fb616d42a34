"""
Core package for citemrf.

This package provides the lexicon, text representations, prior
estimation, belief propagation and the classifier built on them.
"""

from .classifier import MRFClassifier
from .dataset_loader import DatasetLoader
from .lexicon import Lexicon
from .propagation import BeliefPropagationEngine, PropagationResult
from .relatedness import RelatednessModel
from .self_belief import SelfBeliefEstimator

__all__ = [
    "MRFClassifier",
    "DatasetLoader",
    "Lexicon",
    "BeliefPropagationEngine",
    "PropagationResult",
    "RelatednessModel",
    "SelfBeliefEstimator",
]
