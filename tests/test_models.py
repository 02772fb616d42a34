"""
Tests for citemrf data models.

This module contains tests for the document and result models used
throughout the package.
"""

import pytest

from citemrf.models.document import Dataset, DatasetContext, Document, Sentence, SentenceType, TextFeatures
from citemrf.models.result import ClassificationResult, CorpusResult, DocumentResult
from conftest import StubText


class TestSentence:
    """Test cases for the Sentence model."""

    def test_valid_sentence(self):
        """Test creating a valid sentence."""
        sentence = Sentence(idx=0, type=SentenceType.EXPLICIT_REFERENCE, text=StubText("Lafferty et al."))

        assert sentence.idx == 0
        assert sentence.is_explicit
        assert sentence.type.is_reference

    def test_negative_index(self):
        """Test that negative indices are rejected."""
        with pytest.raises(ValueError, match="non-negative"):
            Sentence(idx=-1, type=SentenceType.NOT_REFERENCE, text=StubText("x"))

    def test_invalid_type(self):
        """Test that raw strings are rejected as sentence types."""
        with pytest.raises(ValueError, match="SentenceType"):
            Sentence(idx=0, type="NOT_REFERENCE", text=StubText("x"))

    def test_not_reference_is_not_a_reference(self):
        """Test the is_reference flag of each label."""
        assert SentenceType.IMPLICIT_REFERENCE.is_reference
        assert not SentenceType.NOT_REFERENCE.is_reference

    def test_stub_satisfies_text_features(self):
        """Test that the TextFeatures protocol is checked structurally."""
        assert isinstance(StubText("some words"), TextFeatures)


class TestDocument:
    """Test cases for the Document model."""

    def test_explicit_indices(self, stub_document):
        """Test locating explicit references."""
        doc = stub_document([
            ("NOT_REFERENCE", "a"),
            ("EXPLICIT_REFERENCE", "b"),
            ("IMPLICIT_REFERENCE", "c"),
            ("EXPLICIT_REFERENCE", "d"),
        ])

        assert len(doc) == 4
        assert doc.explicit_indices() == [1, 3]

    def test_index_must_match_position(self):
        """Test that sentence indices must follow reading order."""
        sentences = [
            Sentence(idx=0, type=SentenceType.NOT_REFERENCE, text=StubText("a")),
            Sentence(idx=2, type=SentenceType.NOT_REFERENCE, text=StubText("b")),
        ]
        with pytest.raises(ValueError, match="position 1"):
            Document(sentences=tuple(sentences))

    def test_list_is_frozen_to_tuple(self):
        """Test that sentences are stored as an immutable tuple."""
        doc = Document(sentences=[Sentence(idx=0, type=SentenceType.NOT_REFERENCE, text=StubText("a"))])
        assert isinstance(doc.sentences, tuple)

    def test_type_stats(self, stub_document):
        """Test sentence statistics per label."""
        doc = stub_document([
            ("NOT_REFERENCE", "a"),
            ("NOT_REFERENCE", "b"),
            ("IMPLICIT_REFERENCE", "c"),
        ])
        stats = doc.get_type_stats()

        assert stats == {"NOT_REFERENCE": 2, "IMPLICIT_REFERENCE": 1}


class TestDatasetContext:
    """Test cases for the DatasetContext model."""

    def test_empty_author(self):
        """Test that the cited author is required."""
        with pytest.raises(ValueError, match="author"):
            DatasetContext(cited_main_author="  ", cited_title=StubText("t"), cited_content=StubText("c"))

    def test_sets_are_frozen(self):
        """Test that acronyms and hooks become frozensets."""
        context = DatasetContext(
            cited_main_author="Pang",
            cited_title=StubText("t"),
            cited_content=StubText("c"),
            acronyms={"SVM"},
            lexical_hooks=["Naive"],
        )
        assert context.acronyms == frozenset({"SVM"})
        assert isinstance(context.lexical_hooks, frozenset)

    def test_dataset_sentence_count(self, stub_document, stub_context):
        """Test counting sentences across citers."""
        first = stub_document([("NOT_REFERENCE", "a"), ("EXPLICIT_REFERENCE", "b")])
        second = stub_document([("NOT_REFERENCE", "c")])
        dataset = Dataset(label="X", context=stub_context(), citers=[first, second])

        assert dataset.num_sentences == 3
        assert isinstance(dataset.citers, tuple)


class TestClassificationResult:
    """Test cases for the ClassificationResult model."""

    def test_metrics(self):
        """Test precision, recall and F1."""
        result = ClassificationResult(true_positives=3, false_positives=1, true_negatives=4, false_negatives=2)

        assert result.total == 10
        assert result.precision == pytest.approx(0.75)
        assert result.recall == pytest.approx(0.6)
        assert result.accuracy == pytest.approx(0.7)
        assert result.f_score() == pytest.approx(2 * 0.75 * 0.6 / 1.35)

    def test_f_beta(self):
        """Test that beta > 1 weighs recall more."""
        result = ClassificationResult(true_positives=1, false_positives=0, false_negatives=3)

        assert result.f_score(2.0) < result.f_score(1.0)

    def test_empty_metrics_are_zero(self):
        """Test metrics of an empty result."""
        result = ClassificationResult()

        assert result.precision == 0.0
        assert result.recall == 0.0
        assert result.f_score() == 0.0
        assert result.accuracy == 0.0

    def test_negative_counts(self):
        """Test that negative counts are rejected."""
        with pytest.raises(ValueError, match="true_positives"):
            ClassificationResult(true_positives=-1)

    def test_add(self):
        """Test accumulating results."""
        first = ClassificationResult(true_positives=1, false_positives=1, fp_indices=[4], millis=2.0)
        second = ClassificationResult(false_negatives=2, fn_indices=[1, 7], millis=3.0)

        combined = first + second
        assert combined.true_positives == 1
        assert combined.false_negatives == 2
        assert combined.fp_indices == [4]
        assert combined.fn_indices == [1, 7]
        assert combined.millis == pytest.approx(5.0)
        # operands untouched
        assert first.fn_indices == []

        returned = first.add(second)
        assert returned is first
        assert first.false_negatives == 2

    def test_to_dict(self):
        """Test dictionary conversion."""
        data = ClassificationResult(true_positives=1, false_positives=2).to_dict()

        assert data["true_positives"] == 1
        assert data["precision"] == pytest.approx(0.3333)
        assert data["recall"] == 1.0
        assert "f1" in data


class TestCorpusResult:
    """Test cases for the CorpusResult model."""

    def test_totals(self):
        """Test aggregating document results."""
        corpus = CorpusResult(label="P04-1035")
        corpus.documents.append(DocumentResult(index=0, result=ClassificationResult(true_positives=2)))
        corpus.documents.append(DocumentResult(index=1, result=ClassificationResult(false_positives=1,
                                                                                    fp_indices=[3])))
        corpus.failures[2] = "boom"

        totals = corpus.totals
        assert totals.true_positives == 2
        assert totals.false_positives == 1
        assert totals.fp_indices == [3]

        data = corpus.to_dict()
        assert data["label"] == "P04-1035"
        assert data["failures"] == {"2": "boom"}
        assert len(data["documents"]) == 2

    def test_document_to_dict_reports_ref_component(self):
        """Test that beliefs are reported as their reference probability."""
        doc = DocumentResult(index=0, result=ClassificationResult(),
                             self_beliefs=[(0.7, 0.3)], final_beliefs=[(0.25, 0.75)])
        data = doc.to_dict()

        assert data["self_beliefs"] == [0.3]
        assert data["final_beliefs"] == [0.75]
