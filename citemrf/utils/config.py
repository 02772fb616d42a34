"""
Configuration management for the citemrf citation context classifier.

This module provides configuration management, settings handling,
and the validated inference parameters consumed by the MRF engine.
"""

from __future__ import annotations

import json
import logging
import math
from pathlib import Path
from typing import Dict, Any, Optional, Union
from dataclasses import dataclass, field, asdict

from .exceptions import ConfigurationError


log = logging.getLogger(__name__)


@dataclass
class Settings:
    """
    Application settings and configuration parameters.

    Attributes:
        mrf: Graph and inference parameters
        self_belief_weights: Weights of the indicator features in the prior
        features: Text representation settings
        mining: Acronym and lexical hook mining settings
        lexicon: Word list location
        processing: Corpus-level execution settings
    """
    mrf: Dict[str, Any] = field(default_factory=lambda: {
        "neighbourhood": 4,
        "convergence_delta": 0.02,
        "max_iterations": 10,
        "belief_threshold": 0.4,
        "min_self_belief": 0.3,
        "context_window": 2,
    })

    self_belief_weights: Dict[str, float] = field(default_factory=lambda: {
        "author": 2.0,
        "acronym": 1.0,
        "hooks": 1.0,
        "header": 0.5,
    })

    features: Dict[str, Any] = field(default_factory=lambda: {
        "representation": "tfidf",
        "ngram_range": [1, 2],
        "sublinear_tf": True,
    })

    mining: Dict[str, Any] = field(default_factory=lambda: {
        "num_lexical_hooks": 5,
        "author_vicinity": 20,
    })

    lexicon: Dict[str, Any] = field(default_factory=lambda: {
        "wordlist_dir": None,
    })

    processing: Dict[str, Any] = field(default_factory=lambda: {
        "enable_parallel": True,
        "max_workers": 4,
        "show_progress": True,
    })


@dataclass(frozen=True)
class MRFParams:
    """
    Immutable, validated parameters for one classification run.

    Construction fails with ConfigurationError if any value is out of range,
    so a bad configuration is reported before any document is processed.
    """
    neighbourhood: int = 4
    convergence_delta: float = 0.02
    max_iterations: int = 10
    belief_threshold: float = 0.4
    min_self_belief: float = 0.3
    context_window: int = 2
    author_weight: float = 2.0
    acronym_weight: float = 1.0
    hooks_weight: float = 1.0
    header_weight: float = 0.5

    def __post_init__(self) -> None:
        """Validate parameter ranges."""
        if not isinstance(self.neighbourhood, int) or self.neighbourhood < 0:
            raise ConfigurationError("Neighbourhood must be a non-negative integer",
                                     "neighbourhood", str(self.neighbourhood))
        if not isinstance(self.max_iterations, int) or self.max_iterations < 1:
            raise ConfigurationError("Iteration budget must be at least 1",
                                     "max_iterations", str(self.max_iterations))
        if not isinstance(self.context_window, int) or self.context_window < 0:
            raise ConfigurationError("Context window must be a non-negative integer",
                                     "context_window", str(self.context_window))
        if not _is_number(self.convergence_delta) or self.convergence_delta <= 0:
            raise ConfigurationError("Convergence delta must be positive",
                                     "convergence_delta", str(self.convergence_delta))
        if not _is_number(self.belief_threshold) or not (0.0 < self.belief_threshold < 1.0):
            raise ConfigurationError("Belief threshold must be in (0, 1)",
                                     "belief_threshold", str(self.belief_threshold))
        if not _is_number(self.min_self_belief) or not (0.0 <= self.min_self_belief < 1.0):
            raise ConfigurationError("Minimum self belief must be in [0, 1)",
                                     "min_self_belief", str(self.min_self_belief))
        for name in ("author_weight", "acronym_weight", "hooks_weight", "header_weight"):
            if not _is_number(getattr(self, name)):
                raise ConfigurationError("Self belief weight must be a finite number",
                                         name, str(getattr(self, name)))


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


class Config:
    """
    Configuration manager for citemrf.

    Provides centralized configuration management with support for:
    - Default settings
    - User configuration files
    - Runtime configuration changes
    """

    DEFAULT_CONFIG_FILE = "citemrf_config.json"
    USER_CONFIG_DIR = Path.home() / ".config" / "citemrf"

    SECTIONS = ("mrf", "self_belief_weights", "features", "mining", "lexicon", "processing")

    def __init__(self, config_file: Optional[Union[str, Path]] = None) -> None:
        """
        Initialize configuration manager.

        Args:
            config_file: Optional path to configuration file
        """
        self.settings = Settings()
        self.config_file = config_file or self.USER_CONFIG_DIR / self.DEFAULT_CONFIG_FILE
        self._load_configuration()

    def _load_configuration(self) -> None:
        """Load configuration from file if it exists."""
        try:
            if isinstance(self.config_file, str):
                self.config_file = Path(self.config_file)

            if self.config_file.exists():
                with open(self.config_file, 'r', encoding='utf-8') as f:
                    config_data = json.load(f)

                self._update_settings_from_dict(config_data)
                log.info(f"Configuration loaded from {self.config_file}")
            else:
                log.info("Using default configuration")

        except (OSError, ValueError) as e:
            log.warning(f"Failed to load configuration from {self.config_file}: {e}")
            log.info("Using default configuration")

    def _update_settings_from_dict(self, config_dict: Dict[str, Any]) -> None:
        """Update settings from dictionary."""
        for section in self.SECTIONS:
            if section in config_dict and isinstance(config_dict[section], dict):
                getattr(self.settings, section).update(config_dict[section])

    def save_configuration(self, config_file: Optional[Union[str, Path]] = None) -> None:
        """
        Save current configuration to file.

        Args:
            config_file: Optional path to save configuration file
        """
        try:
            save_path = config_file or self.config_file
            if isinstance(save_path, str):
                save_path = Path(save_path)

            save_path.parent.mkdir(parents=True, exist_ok=True)

            config_dict = asdict(self.settings)

            with open(save_path, 'w', encoding='utf-8') as f:
                json.dump(config_dict, f, indent=2, ensure_ascii=False)

            log.info(f"Configuration saved to {save_path}")

        except OSError as e:
            log.error(f"Failed to save configuration: {e}")
            raise

    def get_mrf_params(self) -> MRFParams:
        """
        Build validated inference parameters from the current settings.

        Raises:
            ConfigurationError: If any value is missing or out of range
        """
        return self._build_params(self.settings.mrf, self.settings.self_belief_weights)

    @staticmethod
    def _build_params(mrf: Dict[str, Any], weights: Dict[str, Any]) -> MRFParams:
        try:
            return MRFParams(
                neighbourhood=mrf["neighbourhood"],
                convergence_delta=mrf["convergence_delta"],
                max_iterations=mrf["max_iterations"],
                belief_threshold=mrf["belief_threshold"],
                min_self_belief=mrf["min_self_belief"],
                context_window=mrf["context_window"],
                author_weight=weights["author"],
                acronym_weight=weights["acronym"],
                hooks_weight=weights["hooks"],
                header_weight=weights["header"],
            )
        except KeyError as e:
            raise ConfigurationError("Missing configuration value", str(e))

    def set_mrf_params(self, params: Dict[str, Any]) -> None:
        """
        Update graph and inference parameters.

        Args:
            params: Dictionary of mrf settings to override
        """
        for key in params:
            if key not in self.settings.mrf:
                raise ConfigurationError("Unknown mrf setting", key)
        # validate before touching the live settings
        self._build_params({**self.settings.mrf, **params}, self.settings.self_belief_weights)
        self.settings.mrf.update(params)
        log.info("MRF parameters updated")

    def get_self_belief_weights(self) -> Dict[str, float]:
        """Get current self belief weights."""
        return self.settings.self_belief_weights.copy()

    def set_self_belief_weights(self, weights: Dict[str, float]) -> None:
        """
        Set self belief weights.

        Args:
            weights: Dictionary of indicator weights
        """
        for key, value in weights.items():
            if key not in self.settings.self_belief_weights:
                log.warning(f"Unknown self belief weight key: {key}")
                continue

            if not _is_number(value):
                raise ConfigurationError("Weight must be a number", key, str(value))

            self.settings.self_belief_weights[key] = float(value)

        log.info("Self belief weights updated")

    def get_features_config(self) -> Dict[str, Any]:
        """Get text representation configuration."""
        return self.settings.features.copy()

    def get_mining_config(self) -> Dict[str, Any]:
        """Get acronym and lexical hook mining configuration."""
        return self.settings.mining.copy()

    def get_lexicon_config(self) -> Dict[str, Any]:
        """Get lexicon configuration."""
        return self.settings.lexicon.copy()

    def get_processing_config(self) -> Dict[str, Any]:
        """Get processing configuration."""
        return self.settings.processing.copy()

    def reset_to_defaults(self) -> None:
        """Reset all settings to default values."""
        self.settings = Settings()
        log.info("Configuration reset to defaults")

    def get_config_summary(self) -> str:
        """
        Get a summary of current configuration.

        Returns:
            Formatted configuration summary
        """
        summary = []
        summary.append("=== citemrf Configuration Summary ===")
        summary.append(f"Config file: {self.config_file}")

        for section in self.SECTIONS:
            summary.append("")
            summary.append(f"{section.replace('_', ' ').title()}:")
            for key, value in getattr(self.settings, section).items():
                summary.append(f"  {key}: {value}")

        return "\n".join(summary)

    def validate_configuration(self) -> bool:
        """
        Validate current configuration.

        Returns:
            True if configuration is valid
        """
        try:
            self.get_mrf_params()
        except ConfigurationError as e:
            log.warning(f"Invalid configuration: {e}")
            return False

        if self.settings.features.get("representation") not in ("tfidf", "bag_of_words"):
            return False

        processing = self.settings.processing
        if not isinstance(processing.get("max_workers"), int) or processing["max_workers"] < 1:
            return False

        return all(isinstance(getattr(self.settings, s), dict) for s in self.SECTIONS)
