"""
Input validation utilities for citemrf.

This module validates dataset files, wordlist directories and the
raw JSON structures read from them before models are built.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..utils.exceptions import ValidationError


log = logging.getLogger(__name__)


class InputValidator:
    """
    Input validation utilities for citemrf.
    
    Provides validation methods for:
    - Dataset file paths
    - Wordlist directories
    - Dataset JSON structure
    - Sentence type names
    """
    
    SUPPORTED_DATASET_FORMATS = ['.json']
    SENTENCE_TYPES = ('EXPLICIT_REFERENCE', 'IMPLICIT_REFERENCE', 'NOT_REFERENCE')
    
    @classmethod
    def validate_file_path(cls, file_path: Union[str, Path], must_exist: bool = True,
                          extensions: Optional[List[str]] = None) -> Path:
        """
        Validate a file path.
        
        Args:
            file_path: Path to validate
            must_exist: Whether the file must exist
            extensions: List of allowed extensions (with dots)
            
        Returns:
            Validated Path object
            
        Raises:
            ValidationError: If path is invalid
        """
        if isinstance(file_path, str):
            file_path = Path(file_path)
        
        if not isinstance(file_path, Path):
            raise ValidationError("File path must be a string or Path object")
        
        if not file_path.is_absolute():
            file_path = file_path.resolve()
        
        if must_exist:
            if not file_path.exists():
                raise ValidationError(f"File does not exist: {file_path}")
            
            if not file_path.is_file():
                raise ValidationError(f"Path is not a file: {file_path}")
        
        if extensions:
            if file_path.suffix.lower() not in [ext.lower() for ext in extensions]:
                valid_exts = ', '.join(extensions)
                raise ValidationError(f"File must have one of these extensions: {valid_exts}")
        
        return file_path
    
    @classmethod
    def validate_dataset_file(cls, file_path: Union[str, Path]) -> Path:
        """Validate a dataset file path."""
        return cls.validate_file_path(file_path, must_exist=True,
                                     extensions=cls.SUPPORTED_DATASET_FORMATS)
    
    @classmethod
    def validate_directory_path(cls, dir_path: Union[str, Path]) -> Path:
        """
        Validate that a directory exists.
        
        Raises:
            ValidationError: If path is missing or not a directory
        """
        dir_path = Path(dir_path)
        if not dir_path.exists():
            raise ValidationError(f"Directory does not exist: {dir_path}")
        if not dir_path.is_dir():
            raise ValidationError(f"Path is not a directory: {dir_path}")
        return dir_path
    
    @classmethod
    def validate_sentence_type(cls, name: Any) -> str:
        """Validate a sentence type name and return it upper-cased."""
        if not isinstance(name, str) or name.strip().upper() not in cls.SENTENCE_TYPES:
            raise ValidationError("Unknown sentence type", "type", str(name))
        return name.strip().upper()
    
    @classmethod
    def validate_dataset_dict(cls, data: Any) -> Dict[str, Any]:
        """
        Validate the structure of a parsed dataset file.
        
        Args:
            data: Parsed JSON content
            
        Returns:
            The same dictionary, once validated
            
        Raises:
            ValidationError: If a required field is missing or malformed
        """
        if not isinstance(data, dict):
            raise ValidationError("Dataset must be a JSON object")
        
        cited = data.get("cited")
        if not isinstance(cited, dict):
            raise ValidationError("Dataset is missing the cited work", "cited")
        for key in ("main_author", "title"):
            if not isinstance(cited.get(key), str) or not cited[key].strip():
                raise ValidationError("Cited work field must be a non-empty string", f"cited.{key}")
        if "content" in cited and not isinstance(cited["content"], str):
            raise ValidationError("Cited content must be a string", "cited.content")
        
        citers = data.get("citers")
        if not isinstance(citers, list):
            raise ValidationError("Dataset citers must be a list", "citers")
        for i, citer in enumerate(citers):
            if not isinstance(citer, dict) or not isinstance(citer.get("sentences"), list):
                raise ValidationError("Citer must have a list of sentences", f"citers[{i}]")
            for j, sentence in enumerate(citer["sentences"]):
                if not isinstance(sentence, dict) or not isinstance(sentence.get("text"), str):
                    raise ValidationError("Sentence must have text", f"citers[{i}].sentences[{j}]")
                cls.validate_sentence_type(sentence.get("type"))
        
        for key in ("acronyms", "lexical_hooks"):
            if key in data and not (isinstance(data[key], list)
                                    and all(isinstance(v, str) for v in data[key])):
                raise ValidationError("Must be a list of strings", key)
        
        return data
