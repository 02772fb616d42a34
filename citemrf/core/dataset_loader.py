"""
Dataset loader for citemrf.

This module reads citation context datasets from JSON files and builds
immutable Dataset values with the configured text representation.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .features import create_text_factory
from .lexicon import Lexicon
from .mining import find_acronyms, find_lexical_hooks
from ..models.document import Dataset, DatasetContext, Document, Sentence, SentenceType
from ..utils.config import Config
from ..utils.exceptions import FileFormatError
from ..utils.validators import InputValidator


log = logging.getLogger(__name__)


class DatasetLoader:
    """
    Loads citation context datasets.

    Expected JSON layout::

        {
          "label": "P04-1035",
          "cited": {"main_author": "Pang", "title": "...", "content": "..."},
          "citers": [
            {"title": "...", "sentences": [{"type": "NOT_REFERENCE", "text": "..."}]}
          ],
          "acronyms": ["..."],        optional, mined when absent
          "lexical_hooks": ["..."]    optional, mined when absent
        }
    """

    def __init__(self, config: Optional[Config] = None, lexicon: Optional[Lexicon] = None,
                 representation: Optional[str] = None) -> None:
        """
        Initialize the loader.

        Args:
            config: Optional configuration object
            lexicon: Optional lexicon; the configured one is loaded otherwise
            representation: Optional override of the configured text representation
        """
        self.config = config or Config()
        self.lexicon = lexicon or Lexicon.from_config(self.config.get_lexicon_config().get("wordlist_dir"))
        self.representation = representation or self.config.get_features_config().get("representation", "tfidf")
        mining = self.config.get_mining_config()
        self.num_lexical_hooks = int(mining.get("num_lexical_hooks", 5))
        self.author_vicinity = int(mining.get("author_vicinity", 20))

    def load(self, file_path: Union[str, Path]) -> Dataset:
        """
        Load a dataset file.

        Raises:
            ValidationError: If the path or the content is invalid
            FileFormatError: If the file is not readable JSON
        """
        path = InputValidator.validate_dataset_file(file_path)
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise FileFormatError(f"Invalid JSON: {e.msg}", str(path), e.lineno, e.colno)
        except (OSError, UnicodeDecodeError) as e:
            raise FileFormatError(f"Cannot read dataset: {e}", str(path))

        dataset = self.load_dict(data, default_label=path.stem)
        log.info(f"Loaded dataset {dataset.label}: {len(dataset.citers)} citers, "
                 f"{dataset.num_sentences} sentences")
        return dataset

    def load_many(self, file_paths: List[Union[str, Path]]) -> List[Dataset]:
        return [self.load(p) for p in file_paths]

    def load_dict(self, data: Dict[str, Any], default_label: str = "dataset") -> Dataset:
        """Build a Dataset from already parsed JSON content."""
        data = InputValidator.validate_dataset_dict(data)
        cited = data["cited"]
        author = cited["main_author"].strip()
        title = cited["title"]
        content = cited.get("content") or title

        citers_raw = data["citers"]
        sentence_texts = [s["text"] for c in citers_raw for s in c["sentences"]]

        factory = create_text_factory(self.config.get_features_config(), self.lexicon, self.representation)
        factory.fit([title, content] + sentence_texts)
        cited_title, cited_content = factory.make_all([title, content])

        citers = []
        for citer in citers_raw:
            texts = factory.make_all([s["text"] for s in citer["sentences"]])
            sentences = [
                Sentence(idx=i, type=SentenceType[InputValidator.validate_sentence_type(s["type"])], text=t)
                for i, (s, t) in enumerate(zip(citer["sentences"], texts))
            ]
            citers.append(Document(sentences=tuple(sentences), title=citer.get("title", "")))

        explicit = [s["text"] for c in citers_raw for s in c["sentences"]
                    if str(s["type"]).strip().upper() == SentenceType.EXPLICIT_REFERENCE.value]
        if "acronyms" in data:
            acronyms = set(data["acronyms"])
        else:
            acronyms = find_acronyms(explicit, author, self.author_vicinity)
        if "lexical_hooks" in data:
            hooks = set(data["lexical_hooks"])
        else:
            hooks = find_lexical_hooks(explicit, author, self.num_lexical_hooks, self.author_vicinity)
        hooks.discard(author)

        context = DatasetContext(
            cited_main_author=author,
            cited_title=cited_title,
            cited_content=cited_content,
            acronyms=frozenset(acronyms),
            lexical_hooks=frozenset(hooks),
        )
        return Dataset(label=str(data.get("label") or default_label), context=context, citers=tuple(citers))
