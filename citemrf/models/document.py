"""
Document models for citemrf.

This module defines the data structures used to represent a cited work,
the papers citing it and their sentences.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, List, Protocol, Tuple, runtime_checkable


@runtime_checkable
class TextFeatures(Protocol):
    """
    Capability interface of a sentence representation.

    Concrete variants (bag of words, TF-IDF n-grams) are chosen when a
    dataset is loaded; the inference engine only relies on this interface.
    """

    raw: str

    @property
    def words(self) -> List[str]:
        """Raw whitespace tokens, punctuation kept."""
        ...

    def similarity(self, other: "TextFeatures") -> float:
        """Similarity in [0, 1] to another representation of the same kind."""
        ...


class SentenceType(Enum):
    """Ground-truth label of a sentence with respect to the cited work."""
    EXPLICIT_REFERENCE = "EXPLICIT_REFERENCE"
    IMPLICIT_REFERENCE = "IMPLICIT_REFERENCE"
    NOT_REFERENCE = "NOT_REFERENCE"

    @property
    def is_reference(self) -> bool:
        return self is not SentenceType.NOT_REFERENCE


@dataclass(frozen=True)
class Sentence:
    """
    Represents a sentence within a citing paper.

    Attributes:
        idx: Position of the sentence in its document (0-based)
        type: Ground-truth label, used for evaluation only
        text: Text representation exposing tokens and similarity
    """
    idx: int
    type: SentenceType
    text: TextFeatures

    def __post_init__(self) -> None:
        """Validate sentence data after initialization."""
        if self.idx < 0:
            raise ValueError("Sentence index must be non-negative")
        if not isinstance(self.type, SentenceType):
            raise ValueError("Sentence type must be a SentenceType")

    @property
    def is_explicit(self) -> bool:
        return self.type is SentenceType.EXPLICIT_REFERENCE


@dataclass(frozen=True)
class Document:
    """
    Represents a citing paper as an ordered sequence of sentences.

    Attributes:
        sentences: Sentences in reading order, ``sentences[i].idx == i``
        title: Title of the citing paper
    """
    sentences: Tuple[Sentence, ...]
    title: str = ""

    def __post_init__(self) -> None:
        """Validate document data after initialization."""
        object.__setattr__(self, "sentences", tuple(self.sentences))
        for position, sentence in enumerate(self.sentences):
            if sentence.idx != position:
                raise ValueError(f"Sentence at position {position} has index {sentence.idx}")

    def __len__(self) -> int:
        return len(self.sentences)

    def explicit_indices(self) -> List[int]:
        """Get the positions of all explicit references."""
        return [s.idx for s in self.sentences if s.is_explicit]

    def get_type_stats(self) -> dict:
        """Get sentence count statistics per label."""
        return dict(Counter(s.type.value for s in self.sentences))


@dataclass(frozen=True)
class DatasetContext:
    """
    Data about the cited work, shared read-only by every citing paper.

    Attributes:
        cited_main_author: Surname of the cited work's first author
        cited_title: Representation of the cited title
        cited_content: Representation of the cited work's full content
        acronyms: Acronyms associated with the cited work
        lexical_hooks: Capitalised words frequently used to refer to it
    """
    cited_main_author: str
    cited_title: TextFeatures
    cited_content: TextFeatures
    acronyms: FrozenSet[str] = field(default_factory=frozenset)
    lexical_hooks: FrozenSet[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if not self.cited_main_author or not self.cited_main_author.strip():
            raise ValueError("Cited main author cannot be empty")
        object.__setattr__(self, "acronyms", frozenset(self.acronyms))
        object.__setattr__(self, "lexical_hooks", frozenset(self.lexical_hooks))


@dataclass(frozen=True)
class Dataset:
    """
    A cited work together with all the papers citing it.

    Attributes:
        label: Dataset identifier, e.g. an ACL anthology id
        context: Shared data about the cited work
        citers: Citing papers
    """
    label: str
    context: DatasetContext
    citers: Tuple[Document, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "citers", tuple(self.citers))

    @property
    def num_sentences(self) -> int:
        return sum(len(c) for c in self.citers)
