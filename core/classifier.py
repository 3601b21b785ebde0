"""Aggregating framework classifier for one source language."""
from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Optional, Tuple
import logging
import threading

from core.context import DetectionContext, ImportLike, normalize_annotations, to_import_records
from core.detection_aggregator import DetectionAggregator
from core.evaluator import RuleSetEvaluator
from models.detection import AnnotationInfo, DetectionMethod, DetectionResult
from models.rule_set import RuleSet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RuleSetStatistics:
    name: str
    annotation_count: int
    category_count: int
    import_pattern_count: int


@dataclass(frozen=True)
class ClassifierStatistics:
    language: str
    total_rule_sets: int
    total_annotations: int
    total_import_patterns: int
    rule_sets: Tuple[RuleSetStatistics, ...] = ()

    def to_dict(self) -> Dict[str, object]:
        return {
            "language": self.language,
            "totalRuleSets": self.total_rule_sets,
            "totalAnnotations": self.total_annotations,
            "totalImportPatterns": self.total_import_patterns,
            "ruleSets": [
                {
                    "name": s.name,
                    "annotationCount": s.annotation_count,
                    "categoryCount": s.category_count,
                    "importPatternCount": s.import_pattern_count,
                }
                for s in self.rule_sets
            ],
        }


@dataclass(frozen=True)
class _Registry:
    """Immutable view of the registered rule sets and the maps derived from them."""
    evaluators: Tuple[RuleSetEvaluator, ...] = ()
    framework_map: Dict[str, str] = field(default_factory=dict)
    category_map: Dict[str, str] = field(default_factory=dict)
    # annotation -> names of every rule set claiming it, in registration order
    claimants: Dict[str, Tuple[str, ...]] = field(default_factory=dict)

    @classmethod
    def build(cls, rule_sets: Iterable[RuleSet]) -> "_Registry":
        evaluators = tuple(RuleSetEvaluator(rs) for rs in rule_sets)
        framework_map: Dict[str, str] = {}
        category_map: Dict[str, str] = {}
        claimants: Dict[str, List[str]] = {}
        for evaluator in evaluators:
            for annotation, rule in evaluator.rule_set.annotation_map.items():
                # Last registered wins for the flat lookups
                framework_map[annotation] = rule.framework
                category_map[annotation] = rule.category
                claimants.setdefault(annotation, []).append(evaluator.name)
        return cls(
            evaluators=evaluators,
            framework_map=framework_map,
            category_map=category_map,
            claimants={k: tuple(v) for k, v in claimants.items()},
        )

    @property
    def rule_sets(self) -> Tuple[RuleSet, ...]:
        return tuple(e.rule_set for e in self.evaluators)


class FrameworkClassifier:
    """
    Classifies code entities against every rule set registered for a language.

    Each rule set is scored independently and the most confident answer wins.
    The registry is replaced wholesale on every change, so concurrent
    classification calls always see a complete, consistent set of rules.
    """

    def __init__(self, language: str, rule_sets: Iterable[RuleSet] = ()):
        self.language = language
        self._lock = threading.Lock()
        self._registry = _Registry()
        rule_sets = list(rule_sets)
        if rule_sets:
            with self._lock:
                self._registry = _Registry.build(self._dedupe(rule_sets))
        logger.info(f"Initialized {language} classifier with {len(self._registry.evaluators)} rule sets")

    @staticmethod
    def _dedupe(rule_sets: List[RuleSet]) -> List[RuleSet]:
        by_name: Dict[str, RuleSet] = {}
        for rule_set in rule_sets:
            if rule_set.name in by_name:
                logger.warning(f"Rule set '{rule_set.name}' already registered, overwriting")
            by_name[rule_set.name] = rule_set
        return list(by_name.values())

    # Registry management

    def add_rule_set(self, rule_set: RuleSet) -> None:
        """Register a rule set; one with the same name is replaced in place."""
        with self._lock:
            current = list(self._registry.rule_sets)
            names = [rs.name for rs in current]
            if rule_set.name in names:
                logger.warning(f"Rule set '{rule_set.name}' already registered, overwriting")
                current[names.index(rule_set.name)] = rule_set
            else:
                current.append(rule_set)
            self._registry = _Registry.build(current)
        logger.debug(f"Registered rule set: {rule_set.name} ({self.language})")

    def remove_rule_set(self, name: str) -> bool:
        """Unregister a rule set by name. Returns False if none was registered."""
        with self._lock:
            current = list(self._registry.rule_sets)
            remaining = [rs for rs in current if rs.name != name]
            if len(remaining) == len(current):
                return False
            self._registry = _Registry.build(remaining)
        logger.debug(f"Removed rule set: {name} ({self.language})")
        return True

    def rule_sets(self) -> Tuple[RuleSet, ...]:
        return self._registry.rule_sets

    def get_rule_set(self, name: str) -> Optional[RuleSet]:
        for rule_set in self._registry.rule_sets:
            if rule_set.name == name:
                return rule_set
        return None

    # Flat single-annotation lookups

    def detect_framework(self, annotation: str) -> Optional[str]:
        return self._registry.framework_map.get(annotation)

    def categorize_annotation(self, annotation: str) -> Optional[str]:
        return self._registry.category_map.get(annotation)

    def supported_frameworks(self) -> List[str]:
        return list(dict.fromkeys(self._registry.framework_map.values()))

    def supported_categories(self) -> List[str]:
        return list(dict.fromkeys(self._registry.category_map.values()))

    # Scored detection

    def from_annotations(self, annotations: Iterable[str]) -> DetectionResult:
        registry = self._registry
        annotations = normalize_annotations(annotations)
        result = DetectionAggregator.select_best(
            (e.from_annotations(annotations) for e in registry.evaluators),
            DetectionMethod.ANNOTATION,
        )
        return self._with_ambiguity(registry, result)

    def from_imports(self, imports: Iterable[ImportLike]) -> DetectionResult:
        registry = self._registry
        imports = to_import_records(imports)
        return DetectionAggregator.select_best(
            (e.from_imports(imports) for e in registry.evaluators),
            DetectionMethod.IMPORT,
        )

    def with_context(self, context: DetectionContext) -> DetectionResult:
        """Score every rule set against annotations and imports and return the best."""
        registry = self._registry
        result = DetectionAggregator.select_best(
            (e.with_context(context) for e in registry.evaluators),
            DetectionMethod.COMBINED,
        )
        result = self._with_ambiguity(registry, result)
        logger.debug(
            f"Classified {context.file_path or '<entity>'} as {result.framework} "
            f"({result.confidence}, {result.method.value})"
        )
        return result

    def classify(
        self,
        annotations: Iterable[str] = (),
        imports: Iterable[ImportLike] = (),
        file_path: Optional[str] = None,
    ) -> DetectionResult:
        return self.with_context(DetectionContext.build(annotations, imports, file_path))

    @staticmethod
    def _with_ambiguity(registry: _Registry, result: DetectionResult) -> DetectionResult:
        ambiguous = tuple(
            a for a in result.matched_annotations
            if any(name != result.framework for name in registry.claimants.get(a, ()))
        )
        if not ambiguous:
            return result
        return replace(result, ambiguous_annotations=ambiguous)

    def describe_annotations(
        self,
        annotations: Iterable[str],
        result: Optional[DetectionResult] = None,
    ) -> List[AnnotationInfo]:
        """
        Build the annotation records stored on a code entity.

        Categories always come from the flat category map. Frameworks do too,
        unless ``result`` is given: annotations that drove that scored result
        are attributed to its framework instead.
        """
        registry = self._registry
        scored = set(result.matched_annotations) if result is not None and not result.is_empty else set()
        infos = []
        for annotation in normalize_annotations(annotations):
            framework = result.framework if annotation in scored else registry.framework_map.get(annotation)
            infos.append(
                AnnotationInfo(
                    name=annotation,
                    framework=framework,
                    category=registry.category_map.get(annotation),
                )
            )
        return infos

    def get_statistics(self) -> ClassifierStatistics:
        registry = self._registry
        breakdown = tuple(
            RuleSetStatistics(
                name=rs.name,
                annotation_count=len(rs.supported_annotations()),
                category_count=len(rs.supported_categories()),
                import_pattern_count=len(rs.import_patterns),
            )
            for rs in registry.rule_sets
        )
        return ClassifierStatistics(
            language=self.language,
            total_rule_sets=len(breakdown),
            total_annotations=len(registry.framework_map),
            total_import_patterns=sum(s.import_pattern_count for s in breakdown),
            rule_sets=breakdown,
        )
