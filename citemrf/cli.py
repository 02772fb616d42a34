"""
Command line interface for citemrf.

This module provides the command line interface for classifying the
citation context sentences of one or more datasets from the terminal.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .core.classifier import MRFClassifier
from .core.dataset_loader import DatasetLoader
from .core.features import REPRESENTATIONS
from .models.result import ClassificationResult, CorpusResult
from .utils.config import Config
from .utils.exceptions import CiteMRFError, ConfigurationError, ProcessingError, ValidationError


def setup_logging(level: str = "INFO") -> None:
    """
    Set up logging for CLI.

    Args:
        level: Logging level
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format='[%(levelname)s] %(message)s',
        stream=sys.stdout
    )


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command line arguments.

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        description="citemrf - Classify citation context sentences with an MRF",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Classify the citers of one dataset
  citemrf --dataset P04-1035.json

  # Several datasets, smaller window, results written to JSON
  citemrf --dataset D07-1031.json J96-2004.json --neighbourhood 3 --output results.json

  # Bag-of-words similarity, sequential processing
  citemrf --dataset P04-1035.json --representation bag_of_words --workers 1
        """
    )

    parser.add_argument(
        "--dataset", "-d",
        nargs='+',
        required=True,
        help="Paths to dataset files (.json)"
    )

    parser.add_argument(
        "--config",
        help="Path to configuration file"
    )

    parser.add_argument(
        "--neighbourhood", "-n",
        type=int,
        help="Window radius of the sentence graph (default from config: 4)"
    )

    parser.add_argument(
        "--threshold", "-t",
        type=float,
        help="Belief threshold for predicting a reference (default from config: 0.4)"
    )

    parser.add_argument(
        "--max-iterations",
        type=int,
        help="Maximum number of propagation sweeps (default from config: 10)"
    )

    parser.add_argument(
        "--representation",
        choices=REPRESENTATIONS,
        help="Text representation used for similarities"
    )

    parser.add_argument(
        "--workers",
        type=int,
        help="Number of documents classified in parallel"
    )

    parser.add_argument(
        "--output", "-o",
        help="Write full results as JSON to this file"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose output"
    )

    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress non-error output"
    )

    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s 1.0.0"
    )

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> Config:
    """
    Load configuration and apply command line overrides.

    Raises:
        ConfigurationError: If an override is invalid
    """
    config = Config(args.config) if args.config else Config()

    overrides = {}
    if args.neighbourhood is not None:
        overrides["neighbourhood"] = args.neighbourhood
    if args.threshold is not None:
        overrides["belief_threshold"] = args.threshold
    if args.max_iterations is not None:
        overrides["max_iterations"] = args.max_iterations
    if overrides:
        config.set_mrf_params(overrides)

    if args.representation:
        config.settings.features["representation"] = args.representation
    if args.workers is not None:
        if args.workers < 1:
            raise ConfigurationError("Worker count must be at least 1", "processing.max_workers",
                                     str(args.workers))
        config.settings.processing["max_workers"] = args.workers
    if args.quiet:
        config.settings.processing["show_progress"] = False

    return config


def run_classification(args: argparse.Namespace) -> List[CorpusResult]:
    """
    Run the classification.

    Args:
        args: Parsed command line arguments
    """
    logger = logging.getLogger(__name__)

    try:
        config = build_config(args)
        classifier = MRFClassifier(config)
        loader = DatasetLoader(config, classifier.lexicon)

        results = []
        for path in args.dataset:
            logger.info(f"Loading dataset: {path}")
            dataset = loader.load(path)
            results.append(classifier.classify(dataset))

        if not args.quiet:
            print_results(results)

        if args.output:
            save_results(results, args.output)
            logger.info(f"Results saved to {args.output}")

        return results

    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)
    except ValidationError as e:
        logger.error(f"Validation error: {e}")
        sys.exit(1)
    except ProcessingError as e:
        logger.error(f"Processing error: {e}")
        sys.exit(1)
    except CiteMRFError as e:
        logger.error(f"citemrf error: {e}")
        sys.exit(1)


def print_results(results: List[CorpusResult]) -> None:
    """
    Print a precision / recall table, one row per dataset plus the total.

    Args:
        results: Results of every classified dataset
    """
    print("\n" + "="*80)
    print("MRF CLASSIFICATION RESULTS")
    print("="*80)
    print(f"{'dataset':<20}{'TP':>6}{'FP':>6}{'TN':>7}{'FN':>6}{'prec':>8}{'rec':>8}{'F1':>8}{'failed':>8}")
    print("-" * 80)

    combined = ClassificationResult()
    failed = 0
    for corpus in results:
        totals = corpus.totals
        combined.add(totals)
        failed += len(corpus.failures)
        print(_row(corpus.label, totals, len(corpus.failures)))

    print("-" * 80)
    print(_row("TOTAL", combined, failed))
    print(f"\nTotal time: {combined.millis / 1000.0:.2f} s")
    print("="*80)


def _row(label: str, r: ClassificationResult, failed: int) -> str:
    return (f"{label[:19]:<20}{r.true_positives:>6}{r.false_positives:>6}{r.true_negatives:>7}"
            f"{r.false_negatives:>6}{r.precision:>8.3f}{r.recall:>8.3f}{r.f_score():>8.3f}{failed:>8}")


def save_results(results: List[CorpusResult], output: str) -> None:
    path = Path(output)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump([r.to_dict() for r in results], f, indent=2, ensure_ascii=False)


def main(argv: Optional[List[str]] = None) -> None:
    """
    Main CLI entry point.
    """
    args = parse_arguments(argv)

    if args.quiet:
        log_level = "ERROR"
    elif args.verbose:
        log_level = "DEBUG"
    else:
        log_level = "INFO"

    setup_logging(log_level)

    run_classification(args)


if __name__ == "__main__":
    main()
