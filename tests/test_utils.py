"""
Tests for citemrf utilities.

This module contains tests for configuration, exceptions,
and validation utilities.
"""

import json
from unittest.mock import MagicMock

import pytest

from citemrf.utils.config import Config, MRFParams, Settings
from citemrf.utils.exceptions import (
    CiteMRFError, ConfigurationError, FileFormatError, InferenceError,
    ProcessingError, ValidationError, get_error_context, log_exception
)
from citemrf.utils.validators import InputValidator


class TestConfig:
    """Test cases for Config class."""

    def test_default_configuration(self, temp_dir):
        """Test default configuration loading."""
        config = Config(temp_dir / "absent.json")

        assert isinstance(config.settings, Settings)
        assert config.settings.mrf["neighbourhood"] == 4
        assert config.settings.mrf["belief_threshold"] == 0.4
        assert config.settings.features["representation"] == "tfidf"
        assert config.validate_configuration()

    def test_load_overrides(self, temp_dir):
        """Test that a configuration file overrides defaults section by section."""
        config_file = temp_dir / "config.json"
        config_file.write_text(json.dumps({
            "mrf": {"neighbourhood": 2},
            "processing": {"max_workers": 8},
        }))

        config = Config(str(config_file))

        assert config.settings.mrf["neighbourhood"] == 2
        # untouched keys keep their defaults
        assert config.settings.mrf["max_iterations"] == 10
        assert config.get_processing_config()["max_workers"] == 8

    def test_malformed_file_falls_back_to_defaults(self, temp_dir):
        """Test that an unreadable configuration file is ignored."""
        config_file = temp_dir / "config.json"
        config_file.write_text("{not json")

        config = Config(config_file)

        assert config.settings.mrf["neighbourhood"] == 4

    def test_save_and_reload(self, temp_dir):
        """Test configuration persistence."""
        config = Config(temp_dir / "config.json")
        config.set_mrf_params({"neighbourhood": 3, "belief_threshold": 0.5})
        config.save_configuration()

        reloaded = Config(temp_dir / "config.json")
        params = reloaded.get_mrf_params()
        assert params.neighbourhood == 3
        assert params.belief_threshold == 0.5

    def test_get_mrf_params(self, sample_config):
        """Test building validated inference parameters."""
        params = sample_config.get_mrf_params()

        assert params == MRFParams()
        assert params.author_weight == 2.0
        assert params.context_window == 2

    def test_set_unknown_mrf_param(self, sample_config):
        """Test that unknown keys are rejected."""
        with pytest.raises(ConfigurationError, match="Unknown mrf setting"):
            sample_config.set_mrf_params({"neighborhood": 3})

    def test_set_invalid_mrf_param(self, sample_config):
        """Test that invalid values fail fast."""
        with pytest.raises(ConfigurationError, match="Neighbourhood"):
            sample_config.set_mrf_params({"neighbourhood": -1})

    def test_rejected_override_leaves_settings_untouched(self, sample_config):
        """Test that a rejected update does not leak into the live settings."""
        with pytest.raises(ConfigurationError):
            sample_config.set_mrf_params({"neighbourhood": 2, "belief_threshold": 1.5})

        assert sample_config.settings.mrf["neighbourhood"] == 4
        assert sample_config.settings.mrf["belief_threshold"] == 0.4
        assert sample_config.get_mrf_params() == MRFParams()

    def test_missing_value(self, sample_config):
        """Test that a missing key is reported as a configuration error."""
        del sample_config.settings.mrf["context_window"]

        with pytest.raises(ConfigurationError, match="Missing configuration value"):
            sample_config.get_mrf_params()

    def test_self_belief_weights(self, sample_config):
        """Test updating indicator weights."""
        sample_config.set_self_belief_weights({"author": 3, "unknown": 1.0})

        weights = sample_config.get_self_belief_weights()
        assert weights["author"] == 3.0
        assert "unknown" not in weights
        assert sample_config.get_mrf_params().author_weight == 3.0

        with pytest.raises(ConfigurationError):
            sample_config.set_self_belief_weights({"header": "high"})

    def test_invalid_configuration_detected(self, sample_config):
        """Test configuration validation."""
        sample_config.settings.features["representation"] = "word2vec"
        assert not sample_config.validate_configuration()

        sample_config.reset_to_defaults()
        assert sample_config.validate_configuration()

        sample_config.settings.mrf["max_iterations"] = 0
        assert not sample_config.validate_configuration()

    def test_config_summary(self, sample_config):
        """Test configuration summary."""
        summary = sample_config.get_config_summary()

        assert "citemrf Configuration Summary" in summary
        assert "neighbourhood: 4" in summary
        assert "Self Belief Weights:" in summary


class TestMRFParams:
    """Test cases for MRFParams validation."""

    @pytest.mark.parametrize("field,value", [
        ("neighbourhood", -1),
        ("neighbourhood", 1.5),
        ("max_iterations", 0),
        ("context_window", -2),
        ("convergence_delta", 0.0),
        ("belief_threshold", 1.0),
        ("belief_threshold", 0.0),
        ("min_self_belief", 1.0),
        ("author_weight", float("nan")),
        ("header_weight", "0.5"),
    ])
    def test_out_of_range(self, field, value):
        """Test that out of range values are rejected."""
        with pytest.raises(ConfigurationError) as exc_info:
            MRFParams(**{field: value})

        assert exc_info.value.config_key == field

    def test_zero_neighbourhood_allowed(self):
        """Test that an edgeless graph is a valid configuration."""
        assert MRFParams(neighbourhood=0).neighbourhood == 0

    def test_immutable(self):
        """Test that parameters cannot change after construction."""
        params = MRFParams()
        with pytest.raises(Exception):
            params.neighbourhood = 2


class TestExceptions:
    """Test cases for custom exceptions."""

    def test_base_exception(self):
        """Test base exception formatting."""
        error = CiteMRFError("Something failed", "extra")

        assert str(error) == "Something failed (extra)"
        assert str(CiteMRFError("plain")) == "plain"

    def test_validation_error(self):
        """Test validation error details."""
        error = ValidationError("Bad value", "threshold", "2")

        assert isinstance(error, CiteMRFError)
        assert error.field == "threshold"
        assert "field: threshold, value: 2" in str(error)

    def test_configuration_error(self):
        """Test configuration error details."""
        error = ConfigurationError("Bad config", "mrf.neighbourhood", "-1")

        assert error.config_key == "mrf.neighbourhood"
        assert "key: mrf.neighbourhood" in str(error)

    def test_inference_error(self):
        """Test that inference errors are processing errors tied to a sentence."""
        error = InferenceError("NaN belief", 3, "similarity=nan")

        assert isinstance(error, ProcessingError)
        assert error.sentence_index == 3
        assert error.operation == "inference"
        assert str(error).startswith("NaN belief (sentence: 3, operation: inference")

    def test_file_format_error(self):
        """Test file format error details."""
        error = FileFormatError("Invalid JSON", "data.json", 3, 14)

        assert str(error) == "Invalid JSON (file: data.json, at: 3:14)"
        assert error.line == 3
        assert str(FileFormatError("Cannot read", "data.json")) == "Cannot read (file: data.json)"

    def test_error_context(self):
        """Test error context formatting."""
        assert get_error_context(ValueError("boom")) == "ValueError: boom"
        assert get_error_context(CiteMRFError("boom")) == "boom"

    def test_log_exception_levels(self):
        """Test that validation problems log as warnings and others as errors."""
        logger = MagicMock()

        log_exception(logger, ValidationError("bad input"), "Loading")
        logger.warning.assert_called_once_with("Loading - bad input")

        log_exception(logger, InferenceError("NaN"))
        logger.error.assert_called_once_with("NaN (operation: inference)")


class TestInputValidator:
    """Test cases for InputValidator."""

    def test_validate_dataset_file(self, sample_dataset_file):
        """Test validating an existing dataset file."""
        assert InputValidator.validate_dataset_file(str(sample_dataset_file)) == sample_dataset_file

    def test_missing_file(self, temp_dir):
        """Test validation of a missing file."""
        with pytest.raises(ValidationError, match="File does not exist"):
            InputValidator.validate_dataset_file(temp_dir / "missing.json")

    def test_wrong_extension(self, temp_dir):
        """Test validation of an unsupported extension."""
        path = temp_dir / "dataset.txt"
        path.write_text("{}")

        with pytest.raises(ValidationError, match="extensions"):
            InputValidator.validate_dataset_file(path)

    def test_directory(self, temp_dir):
        """Test directory validation."""
        assert InputValidator.validate_directory_path(temp_dir) == temp_dir

        with pytest.raises(ValidationError, match="does not exist"):
            InputValidator.validate_directory_path(temp_dir / "nope")

    def test_sentence_type(self):
        """Test sentence type names are normalized."""
        assert InputValidator.validate_sentence_type(" implicit_reference ") == "IMPLICIT_REFERENCE"

        with pytest.raises(ValidationError, match="Unknown sentence type"):
            InputValidator.validate_sentence_type("MAYBE")

    def test_valid_dataset_dict(self, sample_dataset_dict):
        """Test a well formed dataset passes."""
        assert InputValidator.validate_dataset_dict(sample_dataset_dict) is sample_dataset_dict

    @pytest.mark.parametrize("mutate,field", [
        (lambda d: d.pop("cited"), "cited"),
        (lambda d: d["cited"].update(main_author=""), "cited.main_author"),
        (lambda d: d["cited"].update(content=3), "cited.content"),
        (lambda d: d.update(citers={}), "citers"),
        (lambda d: d["citers"][1]["sentences"][0].pop("text"), "citers[1].sentences[0]"),
        (lambda d: d.update(acronyms=["CRF", 1]), "acronyms"),
    ])
    def test_invalid_dataset_dict(self, sample_dataset_dict, mutate, field):
        """Test that malformed datasets name the offending field."""
        mutate(sample_dataset_dict)

        with pytest.raises(ValidationError) as exc_info:
            InputValidator.validate_dataset_dict(sample_dataset_dict)

        assert exc_info.value.field == field

    def test_invalid_sentence_type_in_dataset(self, sample_dataset_dict):
        """Test that an unknown label is rejected."""
        sample_dataset_dict["citers"][0]["sentences"][0]["type"] = "CITATION"

        with pytest.raises(ValidationError, match="Unknown sentence type"):
            InputValidator.validate_dataset_dict(sample_dataset_dict)
