from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from core.errors import InvalidImportPatternError, RuleSetError
from core.pattern_matcher import matches, validate_pattern


@dataclass(frozen=True)
class AnnotationRule:
    """What a rule set says about one annotation name."""
    framework: str
    category: str


@dataclass(frozen=True)
class ImportPattern:
    """A module path pattern (trailing ``*`` allowed) that indicates a framework."""
    pattern: str
    confidence: int
    framework: str

    def __post_init__(self):
        validate_pattern(self.pattern, self.framework)
        # bool is an int subclass, reject it explicitly
        if isinstance(self.confidence, bool) or not isinstance(self.confidence, int):
            raise InvalidImportPatternError(self.pattern, self.framework, "confidence must be an integer")
        if not 0 <= self.confidence <= 100:
            raise InvalidImportPatternError(
                self.pattern, self.framework, f"confidence {self.confidence} outside [0, 100]"
            )
        if not isinstance(self.framework, str) or not self.framework:
            raise InvalidImportPatternError(self.pattern, self.framework, "framework name is required")

    def matches(self, module: str) -> bool:
        return matches(module, self.pattern)


@dataclass(frozen=True)
class RuleSet:
    """Annotation map and import patterns for a single framework."""
    name: str
    annotation_map: Mapping[str, AnnotationRule] = field(default_factory=dict)
    import_patterns: Tuple[ImportPattern, ...] = ()

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name:
            raise RuleSetError("Rule set name must be a non-empty string")
        for annotation, rule in self.annotation_map.items():
            if rule.framework != self.name:
                raise RuleSetError(
                    f"Annotation '{annotation}' in rule set '{self.name}' claims framework "
                    f"'{rule.framework}'; a rule set may only claim its own framework"
                )
        # Freeze the containers so a registered rule set cannot drift
        object.__setattr__(self, "annotation_map", MappingProxyType(dict(self.annotation_map)))
        object.__setattr__(self, "import_patterns", tuple(self.import_patterns))

    def supported_annotations(self) -> List[str]:
        return list(self.annotation_map)

    def supported_categories(self) -> List[str]:
        return list(dict.fromkeys(rule.category for rule in self.annotation_map.values()))

    def detect_framework(self, annotation: str) -> Optional[str]:
        rule = self.annotation_map.get(annotation)
        return rule.framework if rule else None

    def categorize_annotation(self, annotation: str) -> Optional[str]:
        rule = self.annotation_map.get(annotation)
        return rule.category if rule else None


PatternEntry = Union[ImportPattern, Tuple[Any, ...], Dict[str, Any]]


def _to_import_pattern(entry: PatternEntry, default_framework: str) -> ImportPattern:
    if isinstance(entry, ImportPattern):
        return entry
    if isinstance(entry, dict):
        if "pattern" not in entry or "confidence" not in entry:
            raise InvalidImportPatternError(
                entry.get("pattern"), default_framework, "entry needs 'pattern' and 'confidence'"
            )
        return ImportPattern(
            pattern=entry["pattern"],
            confidence=entry["confidence"],
            framework=entry.get("framework") or default_framework,
        )
    if isinstance(entry, (tuple, list)) and len(entry) in (2, 3):
        framework = entry[2] if len(entry) == 3 and entry[2] else default_framework
        return ImportPattern(pattern=entry[0], confidence=entry[1], framework=framework)
    raise InvalidImportPatternError(entry, default_framework, "expected (pattern, confidence[, framework])")


def make_rule_set(
    name: str,
    annotations: Optional[Mapping[str, str]] = None,
    import_patterns: Iterable[PatternEntry] = (),
) -> RuleSet:
    """
    Build a validated rule set.

    Args:
        name: Framework name; every annotation in the set is attributed to it
        annotations: Mapping of annotation name to category (e.g. {"GetMapping": "web"})
        import_patterns: ImportPattern objects, (pattern, confidence[, framework])
            tuples or {"pattern", "confidence", "framework"} dicts. The framework
            defaults to ``name``.

    Raises:
        RuleSetError: on malformed annotations
        InvalidImportPatternError: on the first malformed import pattern
    """
    annotation_map: Dict[str, AnnotationRule] = {}
    for annotation, category in (annotations or {}).items():
        if not isinstance(annotation, str) or not annotation:
            raise RuleSetError(f"Rule set '{name}' has an invalid annotation name: {annotation!r}")
        if not isinstance(category, str) or not category:
            raise RuleSetError(f"Annotation '{annotation}' in rule set '{name}' needs a category")
        annotation_map[annotation] = AnnotationRule(framework=name, category=category)

    patterns = tuple(_to_import_pattern(entry, name) for entry in import_patterns)
    return RuleSet(name=name, annotation_map=annotation_map, import_patterns=patterns)
