"""
Lexical resources and token predicates.

The Lexicon is built once from plain word lists and then shared read-only
by every component that needs to inspect sentence tokens.
"""

from __future__ import annotations

import logging
import re
import unicodedata
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import FrozenSet, Iterable, List, Optional, Union

from ..utils.exceptions import ConfigurationError, ValidationError
from ..utils.validators import InputValidator


log = logging.getLogger(__name__)

DEFAULT_WORDLIST_DIR = Path(__file__).resolve().parent.parent / "resources" / "wordlists"

HEADER_PATTERN = re.compile(r"\d+\.\d+.*")
_STRIP_CHARS = "()[]{}.,:;\\/\"'`"


def clean_word(word: str) -> str:
    """Strip surrounding brackets and punctuation from a raw token."""
    return word.strip(_STRIP_CHARS)


def ascii_fold(text: str) -> str:
    """Drop diacritics, e.g. ``Pérez`` -> ``Perez``."""
    decomposed = unicodedata.normalize("NFD", text)
    return decomposed.encode("ascii", "ignore").decode("ascii")


@dataclass(frozen=True)
class Lexicon:
    """
    Immutable word lists and the sentence predicates built on them.

    Attributes:
        determiners: Generic determiners ("this", "such", ...)
        work_nouns: Nouns naming a piece of work ("approach", "method", ...)
        third_person_pronouns: Pronouns such as "they" or "he"
        connectors: Discourse connectors opening a sentence ("however", ...)
        stopwords: Function words ignored by bag-of-words features
    """
    determiners: FrozenSet[str]
    work_nouns: FrozenSet[str]
    third_person_pronouns: FrozenSet[str]
    connectors: FrozenSet[str]
    stopwords: FrozenSet[str]

    FILES = {
        "determiners": "determiners.txt",
        "work_nouns": "work_nouns.txt",
        "third_person_pronouns": "third_person_pronouns.txt",
        "connectors": "connectors.txt",
        "stopwords": "stopwords.txt",
    }

    @classmethod
    def from_directory(cls, directory: Union[str, Path]) -> Lexicon:
        """
        Load all word lists from a directory.

        Raises:
            ConfigurationError: If the directory or one of the lists is missing
        """
        try:
            directory = InputValidator.validate_directory_path(directory)
        except ValidationError as e:
            raise ConfigurationError("Invalid wordlist directory", "lexicon.wordlist_dir", str(e))

        lists = {}
        for name, filename in cls.FILES.items():
            path = directory / filename
            if not path.is_file():
                raise ConfigurationError("Missing word list", "lexicon.wordlist_dir", str(path))
            lists[name] = frozenset(_read_words(path))
        log.info(f"Lexicon loaded from {directory}")
        return cls(**lists)

    @classmethod
    def from_words(cls, determiners: Iterable[str] = (), work_nouns: Iterable[str] = (),
                   third_person_pronouns: Iterable[str] = (), connectors: Iterable[str] = (),
                   stopwords: Iterable[str] = ()) -> Lexicon:
        """Build a lexicon from in-memory word collections."""
        return cls(
            determiners=frozenset(w.lower() for w in determiners),
            work_nouns=frozenset(w.lower() for w in work_nouns),
            third_person_pronouns=frozenset(w.lower() for w in third_person_pronouns),
            connectors=frozenset(w.lower() for w in connectors),
            stopwords=frozenset(w.lower() for w in stopwords),
        )

    @staticmethod
    def default() -> Lexicon:
        """The packaged lexicon, loaded once per process."""
        return _default_lexicon()

    @classmethod
    def from_config(cls, wordlist_dir: Optional[Union[str, Path]]) -> Lexicon:
        if wordlist_dir:
            return cls.from_directory(wordlist_dir)
        return cls.default()

    def is_stopword(self, word: str) -> bool:
        return word.lower() in self.stopwords

    def remove_stopwords(self, words: Iterable[str]) -> List[str]:
        return [w for w in words if w.lower() not in self.stopwords]

    # Sentence predicates

    def contains_main_author(self, words: List[str], main_author: str) -> bool:
        """True if any token contains the author surname or its ASCII form."""
        if not main_author:
            return False
        folded = ascii_fold(main_author)
        for word in words:
            if main_author in word or (folded and folded in word):
                return True
        return False

    def contains_acronyms(self, words: List[str], acronyms: Iterable[str]) -> bool:
        acronyms = [a for a in acronyms if a]
        return any(acronym in word for word in words for acronym in acronyms)

    def contains_lexical_hooks(self, sentence: str, lexical_hooks: Iterable[str]) -> bool:
        lowered = sentence.lower()
        return any(hook and hook.lower() in lowered for hook in lexical_hooks)

    def starts_with_section_header(self, words: List[str]) -> bool:
        return bool(words) and HEADER_PATTERN.fullmatch(words[0]) is not None

    def starts_with_connector(self, words: List[str]) -> bool:
        return bool(words) and self._loose_contains(self.connectors, words[0])

    def starts_with_third_person_pronoun(self, words: List[str]) -> bool:
        return bool(words) and self._loose_contains(self.third_person_pronouns, words[0])

    def starts_with_determiner(self, words: List[str]) -> bool:
        return bool(words) and self._loose_contains(self.determiners, words[0])

    def starts_with_it(self, words: List[str]) -> bool:
        return bool(words) and clean_word(words[0]) == "It"

    def contains_det_work(self, words: List[str]) -> bool:
        """True if a determiner is immediately followed by a work noun."""
        for i in range(1, len(words)):
            if (self._loose_contains(self.work_nouns, words[i])
                    and self._loose_contains(self.determiners, words[i - 1])):
                return True
        return False

    @staticmethod
    def _loose_contains(vocabulary: FrozenSet[str], word: str) -> bool:
        # plural form: "methods" matches "method"
        word = clean_word(word).lower()
        if not word:
            return False
        if word in vocabulary:
            return True
        return word.endswith("s") and word[:-1] in vocabulary


def _read_words(path: Path) -> List[str]:
    with open(path, "r", encoding="utf-8") as f:
        return [line.strip().lower() for line in f if line.strip() and not line.startswith("#")]


@lru_cache(maxsize=1)
def _default_lexicon() -> Lexicon:
    return Lexicon.from_directory(DEFAULT_WORDLIST_DIR)
