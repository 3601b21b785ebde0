"""
Utility functions to validate and analyze rule sets for collisions and redundancy.

None of these findings are errors: annotation names shared by several
frameworks are expected and are resolved by scoring at classification time.
The report helps rule authors see where import evidence is needed.
"""

from typing import Dict, List, Optional
from collections import defaultdict
from core.pattern_matcher import pattern_covers
from models.rule_set import RuleSet
from rules.rules_loader import available_languages, load_rules


def detect_annotation_overlaps(rule_sets: List[RuleSet]) -> Dict[str, List[str]]:
    """
    Detect annotations claimed by multiple rule sets.

    Returns:
        Dictionary with annotation names as keys and list of frameworks as values
    """
    annotations_map = defaultdict(list)

    for rule_set in rule_sets:
        for annotation in rule_set.annotation_map:
            annotations_map[annotation].append(rule_set.name)

    return {
        annotation: frameworks
        for annotation, frameworks in annotations_map.items()
        if len(frameworks) > 1
    }


def detect_pattern_overlaps(rule_sets: List[RuleSet]) -> Dict[str, List[str]]:
    """
    Detect import patterns declared by multiple rule sets.

    Returns:
        Dictionary with pattern strings as keys and list of rule set names as values
    """
    patterns_map = defaultdict(list)

    for rule_set in rule_sets:
        for pattern in rule_set.import_patterns:
            if rule_set.name not in patterns_map[pattern.pattern]:
                patterns_map[pattern.pattern].append(rule_set.name)

    return {
        pattern: frameworks
        for pattern, frameworks in patterns_map.items()
        if len(frameworks) > 1
    }


def detect_duplicate_rule_sets(rule_sets: List[RuleSet]) -> List[str]:
    """Names declared by more than one rule set; later ones replace earlier ones."""
    seen = set()
    duplicates = []
    for rule_set in rule_sets:
        if rule_set.name in seen and rule_set.name not in duplicates:
            duplicates.append(rule_set.name)
        seen.add(rule_set.name)
    return duplicates


def detect_redundant_patterns(rule_sets: List[RuleSet]) -> Dict[str, List[str]]:
    """
    Detect import patterns that can never change a rule set's score.

    A pattern is redundant when another pattern of the same rule set, naming
    the same framework with at least the same confidence, matches everything
    it matches.

    Returns:
        Dictionary with rule set names as keys and redundant patterns as values
    """
    redundant = {}

    for rule_set in rule_sets:
        found = []
        patterns = rule_set.import_patterns
        for i, narrow in enumerate(patterns):
            for j, broad in enumerate(patterns):
                if i == j or broad.framework != narrow.framework:
                    continue
                if broad.confidence < narrow.confidence:
                    continue
                # Identical patterns: only flag the later duplicate
                if broad.pattern == narrow.pattern and j > i:
                    continue
                if pattern_covers(broad.pattern, narrow.pattern):
                    found.append(narrow.pattern)
                    break
        if found:
            redundant[rule_set.name] = found

    return redundant


def print_validation_report(
    language: str,
    rule_sets: List[RuleSet],
    verbose: bool = True
) -> None:
    """
    Print a comprehensive validation report of rule sets.

    Args:
        language: Language the rule sets belong to
        rule_sets: Rule sets loaded for that language
        verbose: Whether to print every overlapping annotation
    """
    print("\n" + "="*70)
    print(f"RULES VALIDATION REPORT ({language})")
    print("="*70)

    print(f"\nTotal Rule Sets: {len(rule_sets)}")

    duplicates = detect_duplicate_rule_sets(rule_sets)
    if duplicates:
        print(f"\n⚠ DUPLICATE RULE SETS: {', '.join(duplicates)}")
    else:
        print("\n✓ No duplicate rule sets")

    annotation_overlaps = detect_annotation_overlaps(rule_sets)
    if annotation_overlaps:
        print(f"\n⚠ ANNOTATION OVERLAPS: {len(annotation_overlaps)}")
        if verbose:
            for annotation, frameworks in sorted(annotation_overlaps.items()):
                print(f"  '{annotation}' -> {', '.join(frameworks)}")
    else:
        print("\n✓ No annotation overlaps")

    pattern_overlaps = detect_pattern_overlaps(rule_sets)
    if pattern_overlaps:
        print(f"\n⚠ PATTERN OVERLAPS: {len(pattern_overlaps)}")
        for pattern, frameworks in sorted(pattern_overlaps.items()):
            print(f"  '{pattern}' -> {', '.join(frameworks)}")
    else:
        print("\n✓ No pattern overlaps")

    redundant = detect_redundant_patterns(rule_sets)
    if redundant:
        print(f"\n⚠ REDUNDANT PATTERNS: {sum(len(p) for p in redundant.values())}")
        for name, patterns in redundant.items():
            print(f"  {name}: {', '.join(patterns)}")
    else:
        print("\n✓ No redundant patterns")

    total_annotations = sum(len(rs.annotation_map) for rs in rule_sets)
    total_patterns = sum(len(rs.import_patterns) for rs in rule_sets)

    print("\nStatistics:")
    print(f"  - Total Annotations: {total_annotations}")
    print(f"  - Total Import Patterns: {total_patterns}")
    if rule_sets:
        print(f"  - Avg Annotations per Framework: {total_annotations / len(rule_sets):.1f}")

    print("\n" + "="*70)


def main(argv: Optional[List[str]] = None) -> int:
    import argparse

    parser = argparse.ArgumentParser(
        description="Validate framework rule sets for collisions and redundant patterns",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Check every language
  python -m core.rules_validator

  # Check one language without listing each overlapping annotation
  python -m core.rules_validator --language java --no-verbose
        """
    )
    parser.add_argument('--language', help='Only validate this language (default: all)')
    parser.add_argument('--rules-dir', help='Directory containing <language>.yaml rule files')
    parser.add_argument(
        '--no-verbose',
        action='store_false',
        dest='verbose',
        default=True,
        help='Do not list every overlapping annotation'
    )
    args = parser.parse_args(argv)

    languages = [args.language] if args.language else available_languages(args.rules_dir)
    for language in languages:
        print_validation_report(language, load_rules(language, args.rules_dir), verbose=args.verbose)
    return 0


if __name__ == "__main__":
    import sys
    from core.errors import RuleSetError

    try:
        sys.exit(main())
    except RuleSetError as e:
        print(f"Error: {e}")
        sys.exit(1)
