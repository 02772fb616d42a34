"""
Mining of acronyms and lexical hooks for a cited work.

Both are harvested from the text surrounding the cited author's name in
explicit references: "... the CRF tagger of Lafferty et al. ..." yields
the acronym ``CRF``, and frequent capitalised words near the name become
lexical hooks.
"""

from __future__ import annotations

import logging
import re
from collections import Counter
from typing import Iterable, List, Set

log = logging.getLogger(__name__)

ACRONYM_PATTERN = re.compile(r"(?<=[^a-zA-Z])[A-Z]{2,}(?=[ ,])")
HOOK_PATTERN = re.compile(r"(?<=[^a-zA-Z])[A-Z][a-z]+(?=[ ,:;])")
_JUNK = re.compile(r"[,\[\]()]")


def matches_around_author(explicit_sentences: Iterable[str], author: str,
                          pattern: re.Pattern, vicinity: int = 20) -> List[str]:
    """
    Collect pattern matches within ``vicinity`` characters of the author.

    Only the first occurrence of the author in each sentence is used.
    """
    matches: List[str] = []
    for text in explicit_sentences:
        index = text.find(author)
        if index < 0:
            continue
        left = max(0, index - vicinity)
        right = min(len(text), index + len(author) + vicinity)
        # a leading space lets a match at the very start satisfy the lookbehind
        window = " " + text[left:right] + " "
        for match in pattern.findall(window):
            cleaned = _JUNK.sub("", match).strip()
            if cleaned:
                matches.append(cleaned)
    return matches


def find_acronyms(explicit_sentences: Iterable[str], author: str, vicinity: int = 20) -> Set[str]:
    return set(matches_around_author(explicit_sentences, author, ACRONYM_PATTERN, vicinity))


def find_lexical_hooks(explicit_sentences: Iterable[str], author: str,
                       num_hooks: int = 5, vicinity: int = 20) -> Set[str]:
    """The ``num_hooks`` most frequent capitalised words near the author, author excluded."""
    counts = Counter(
        hook for hook in matches_around_author(explicit_sentences, author, HOOK_PATTERN, vicinity)
        if hook != author
    )
    hooks = {hook for hook, _ in counts.most_common(num_hooks)}
    log.debug(f"Lexical hooks for {author}: {sorted(hooks)}")
    return hooks
