"""Command-line interface: score a pair of strings or rank a candidate file."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Any, Callable, Optional

from fuzzrank.extraction import BUILTIN_SCORERS, InvalidInput, extract, results_to_frame
from fuzzrank.similarity.scoring import distance
from fuzzrank.similarity.types import ScoreOptions, ScorerKind
from fuzzrank.utils.io_utils import load_settings, read_choices
from fuzzrank.utils.logging_utils import DEFAULT_FORMAT, setup_logging
from fuzzrank.utils.path_utils import get_config_path

logger = logging.getLogger(__name__)

SCORER_NAMES = [kind.value for kind in ScorerKind if kind is not ScorerKind.CUSTOM]


def _score_function(name: str) -> Callable[..., Any]:
    if name == "distance":
        return distance
    return BUILTIN_SCORERS[ScorerKind(name)]


def _add_scoring_arguments(parser: argparse.ArgumentParser, scorer_names: list[str]) -> None:
    parser.add_argument(
        "--scorer",
        choices=scorer_names,
        help="Scorer to use (default: extract.scorer from the config)",
    )
    parser.add_argument(
        "--no-full-process",
        action="store_true",
        help="Compare the raw strings without lowercasing/cleanup",
    )
    parser.add_argument(
        "--keep-unicode",
        action="store_true",
        help="Keep non-ASCII characters during cleanup",
    )
    parser.add_argument(
        "--collator",
        action="store_true",
        help="Treat accented and unaccented letters as equal",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for ``python -m fuzzrank``."""
    parser = argparse.ArgumentParser(
        prog="fuzzrank",
        description="Fuzzy string similarity scoring and ranking",
    )
    parser.add_argument(
        "--config",
        default=str(get_config_path()),
        help="Configuration file path",
    )
    parser.add_argument(
        "--log-level",
        help="Logging level (overrides logging.level from the config)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    score_parser = subparsers.add_parser("score", help="Score two strings")
    score_parser.add_argument("first", help="First string")
    score_parser.add_argument("second", help="Second string")
    _add_scoring_arguments(score_parser, SCORER_NAMES + ["distance"])

    extract_parser = subparsers.add_parser(
        "extract",
        help="Rank candidates from a CSV or text file against a query",
    )
    extract_parser.add_argument("query", help="Search term")
    extract_parser.add_argument(
        "--choices",
        required=True,
        help="Candidate file: CSV (see --column) or one candidate per line",
    )
    extract_parser.add_argument("--column", help="CSV column holding the candidates")
    extract_parser.add_argument("--limit", type=int, help="Maximum number of results")
    extract_parser.add_argument(
        "--cutoff",
        type=float,
        help="Only keep scores strictly above this value",
    )
    extract_parser.add_argument(
        "--unsorted",
        action="store_true",
        help="Return results in file order without ranking",
    )
    _add_scoring_arguments(extract_parser, SCORER_NAMES)

    return parser


def _option_overrides(args: argparse.Namespace) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    if args.no_full_process:
        overrides["full_process"] = False
    if args.keep_unicode:
        overrides["force_ascii"] = False
    if args.collator:
        overrides["use_collator"] = True
    if getattr(args, "limit", None) is not None:
        overrides["limit"] = args.limit
    if getattr(args, "cutoff", None) is not None:
        overrides["cutoff"] = args.cutoff
    if getattr(args, "unsorted", False):
        overrides["unsorted"] = True
    return overrides


def main(argv: Optional[list[str]] = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)
    settings = load_settings(args.config)

    log_settings = settings.get("logging", {})
    setup_logging(
        args.log_level or log_settings.get("level", "INFO"),
        log_settings.get("file"),
        log_settings.get("format", DEFAULT_FORMAT),
    )

    options = ScoreOptions.from_settings(settings, **_option_overrides(args))
    scorer_name = args.scorer or settings.get("extract", {}).get("scorer", "ratio")

    if args.command == "score":
        try:
            score_function = _score_function(scorer_name)
        except (ValueError, KeyError):
            logger.error(f"Unknown scorer: {scorer_name!r}")
            return 2
        print(score_function(args.first, args.second, options))
        return 0

    try:
        choices = read_choices(args.choices, args.column)
        results = extract(args.query, choices, options, scorer=scorer_name)
    except (InvalidInput, KeyError, OSError) as e:
        logger.error(f"Extraction failed: {e}")
        return 2

    if not results:
        print("No matches")
        return 0
    print(results_to_frame(results).to_string(index=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
