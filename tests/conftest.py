"""
Test suite initialization for citemrf.

This module provides the main test configuration and fixtures
for the citemrf test suite.
"""

import json
import logging
import tempfile
from pathlib import Path

import pytest

from citemrf.core.features import BagOfWordsText
from citemrf.core.lexicon import Lexicon
from citemrf.models.document import DatasetContext, Document, Sentence, SentenceType
from citemrf.utils.config import Config


# Configure logging for tests
logging.basicConfig(
    level=logging.DEBUG,
    format='[TEST] %(levelname)s - %(name)s - %(message)s'
)


class StubText:
    """TextFeatures stand-in with scripted similarities."""

    def __init__(self, raw, key=None, table=None):
        self.raw = raw
        self.key = key if key is not None else raw
        self.table = table if table is not None else {}

    @property
    def words(self):
        return self.raw.split()

    def similarity(self, other):
        return self.table.get(frozenset((self.key, other.key)), 0.0)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_config(temp_dir):
    """Create a sample configuration for testing."""
    config = Config(temp_dir / "missing_config.json")
    # Override with test-specific settings
    config.settings.processing["show_progress"] = False
    config.settings.processing["max_workers"] = 2
    return config


@pytest.fixture
def lexicon():
    """The packaged lexicon."""
    return Lexicon.default()


@pytest.fixture
def build_document(lexicon):
    """Factory fixture building a bag-of-words document from (type, text) pairs."""
    def _build(specs, title="citing paper"):
        sentences = tuple(
            Sentence(idx=i, type=SentenceType[kind], text=BagOfWordsText(text, lexicon))
            for i, (kind, text) in enumerate(specs)
        )
        return Document(sentences=sentences, title=title)

    return _build


@pytest.fixture
def build_context(lexicon):
    """Factory fixture building a dataset context with bag-of-words cited texts."""
    def _build(author="Lafferty", title="Zebra giraffe okapi",
               content="Walrus narwhal manatee", acronyms=(), hooks=()):
        return DatasetContext(
            cited_main_author=author,
            cited_title=BagOfWordsText(title, lexicon),
            cited_content=BagOfWordsText(content, lexicon),
            acronyms=frozenset(acronyms),
            lexical_hooks=frozenset(hooks),
        )

    return _build


@pytest.fixture
def stub_context():
    """Dataset context whose cited texts are StubText keys 'title' and 'content'."""
    def _build(table=None, author="Lafferty", acronyms=("CRF",), hooks=("Markov",)):
        table = table if table is not None else {}
        return DatasetContext(
            cited_main_author=author,
            cited_title=StubText("title", "title", table),
            cited_content=StubText("content", "content", table),
            acronyms=frozenset(acronyms),
            lexical_hooks=frozenset(hooks),
        )

    return _build


@pytest.fixture
def stub_document():
    """Factory fixture building a document of StubText sentences keyed by position."""
    def _build(specs, table=None):
        table = table if table is not None else {}
        sentences = tuple(
            Sentence(idx=i, type=SentenceType[kind], text=StubText(text, i, table))
            for i, (kind, text) in enumerate(specs)
        )
        return Document(sentences=sentences)

    return _build


@pytest.fixture
def sample_dataset_dict():
    """Sample dataset content for testing."""
    return {
        "label": "W01-0001",
        "cited": {
            "main_author": "Lafferty",
            "title": "Conditional Random Fields: Probabilistic Models for Segmenting and Labeling Sequence Data",
            "content": "We present conditional random fields, a framework for building probabilistic "
                       "models to segment and label sequence data. Conditional random fields avoid "
                       "the label bias problem of maximum entropy Markov models.",
        },
        "citers": [
            {
                "title": "Tagging with conditional models",
                "sentences": [
                    {"type": "NOT_REFERENCE", "text": "Sequence labeling is a core task in natural language processing."},
                    {"type": "EXPLICIT_REFERENCE", "text": "We use the CRF model of Lafferty et al. (2001) for tagging."},
                    {"type": "IMPLICIT_REFERENCE", "text": "This model defines a conditional distribution over label sequences."},
                    {"type": "NOT_REFERENCE", "text": "Our corpus contains newswire text."},
                ],
            },
            {
                "title": "Shallow parsing revisited",
                "sentences": [
                    {"type": "EXPLICIT_REFERENCE", "text": "Conditional random fields (CRF, Lafferty et al., 2001) are popular."},
                    {"type": "IMPLICIT_REFERENCE", "text": "They avoid the label bias problem."},
                    {"type": "NOT_REFERENCE", "text": "We evaluate on three benchmarks."},
                ],
            },
        ],
    }


@pytest.fixture
def sample_dataset_file(temp_dir, sample_dataset_dict):
    """Write the sample dataset to a JSON file."""
    path = temp_dir / "W01-0001.json"
    path.write_text(json.dumps(sample_dataset_dict), encoding="utf-8")
    return path
