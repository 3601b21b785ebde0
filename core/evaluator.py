from typing import Iterable
from analyzers.annotations import AnnotationAnalyzer
from analyzers.imports import ImportAnalyzer
from core.context import DetectionContext, ImportLike
from core.detection_aggregator import DetectionAggregator
from models.detection import DetectionResult
from models.rule_set import RuleSet


class RuleSetEvaluator:
    """Scores one rule set against annotations, imports, or both."""

    def __init__(self, rule_set: RuleSet):
        self.rule_set = rule_set
        self.annotation_analyzer = AnnotationAnalyzer(rule_set)
        self.import_analyzer = ImportAnalyzer(rule_set)

    @property
    def name(self) -> str:
        return self.rule_set.name

    def from_annotations(self, annotations: Iterable[str]) -> DetectionResult:
        return self.annotation_analyzer.analyze(annotations)

    def from_imports(self, imports: Iterable[ImportLike]) -> DetectionResult:
        return self.import_analyzer.analyze(imports)

    def with_context(self, context: DetectionContext) -> DetectionResult:
        return DetectionAggregator.combine(
            self.from_annotations(context.annotations),
            self.from_imports(context.imports),
        )
