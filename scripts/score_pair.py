#!/usr/bin/env python3
"""Score Pair CLI - Debug utility to trace every scoring strategy for two strings.

Usage:
    python scripts/score_pair.py "New York Mets" "new york mets vs atlanta braves"
    python scripts/score_pair.py "résumé" "resume" --keep-unicode --collator
"""

import argparse
import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from fuzzrank import (  # noqa: E402
    ScoreOptions,
    WRatio,
    distance,
    full_process,
    partial_ratio,
    partial_token_set_ratio,
    partial_token_sort_ratio,
    process_and_sort,
    ratio,
    token_set_ratio,
    token_sort_ratio,
    tokenize,
)
from fuzzrank.similarity import matching_blocks  # noqa: E402
from fuzzrank.similarity.scoring import PARTIAL_MIN_LEN_RATIO  # noqa: E402


def trace_scoring(str_a: str, str_b: str, options: ScoreOptions) -> int:
    """Trace the complete scoring process for two strings."""
    print("=" * 80)
    print("SIMILARITY SCORING TRACE")
    print("=" * 80)

    print("\n1. INPUT STRINGS:")
    print(f"   A: '{str_a}'")
    print(f"   B: '{str_b}'")

    proc_a = full_process(str_a, options.force_ascii) if options.full_process else str_a
    proc_b = full_process(str_b, options.force_ascii) if options.full_process else str_b
    print("\n2. PREPROCESSING:")
    print(f"   A: '{proc_a}'")
    print(f"   B: '{proc_b}'")

    print("\n3. TOKENS:")
    print(f"   A tokens: {tokenize(proc_a)} sorted: '{process_and_sort(proc_a)}'")
    print(f"   B tokens: {tokenize(proc_b)} sorted: '{process_and_sort(proc_b)}'")

    if proc_a and proc_b:
        shorter, longer = (proc_a, proc_b) if len(proc_a) <= len(proc_b) else (proc_b, proc_a)
        print("\n4. MATCHING BLOCKS (shorter, longer, size):")
        for block in matching_blocks(shorter, longer):
            print(f"   {tuple(block)}")
        len_ratio = max(len(proc_a), len(proc_b)) / min(len(proc_a), len(proc_b))
        print(f"   length ratio: {len_ratio:.2f} (partial strategies: {len_ratio >= PARTIAL_MIN_LEN_RATIO})")

    print("\n5. STRATEGY SCORES:")
    scorers = [
        ("distance", distance),
        ("ratio", ratio),
        ("partial_ratio", partial_ratio),
        ("token_sort_ratio", token_sort_ratio),
        ("partial_token_sort_ratio", partial_token_sort_ratio),
        ("token_set_ratio", token_set_ratio),
        ("partial_token_set_ratio", partial_token_set_ratio),
    ]
    for name, scorer in scorers:
        print(f"   {name:<26} {scorer(str_a, str_b, options)}")

    final = WRatio(str_a, str_b, options)
    print(f"\n6. WRATIO: {final}")
    print("=" * 80)
    return final


def main() -> None:
    parser = argparse.ArgumentParser(description="Trace fuzzy scoring for two strings")
    parser.add_argument("str_a", help="First string")
    parser.add_argument("str_b", help="Second string")
    parser.add_argument("--no-full-process", action="store_true", help="Skip cleanup")
    parser.add_argument("--keep-unicode", action="store_true", help="Keep non-ASCII characters")
    parser.add_argument("--collator", action="store_true", help="Accent-insensitive equality")
    args = parser.parse_args()

    options = ScoreOptions(
        full_process=not args.no_full_process,
        force_ascii=not args.keep_unicode,
        use_collator=args.collator,
    )
    trace_scoring(args.str_a, args.str_b, options)


if __name__ == "__main__":
    main()
