from typing import Dict, Iterable, List
import logging
from core.context import normalize_annotations
from core.detection_aggregator import DetectionAggregator
from models.detection import DetectionMethod, DetectionResult
from models.rule_set import RuleSet


class AnnotationAnalyzer:
    def __init__(self, rule_set: RuleSet):
        self.rule_set = rule_set

    def analyze(self, annotations: Iterable[str]) -> DetectionResult:
        logger = logging.getLogger(__name__)
        matched: List[str] = []
        framework_counts: Dict[str, int] = {}

        for annotation in normalize_annotations(annotations):
            rule = self.rule_set.annotation_map.get(annotation)
            if rule is None:
                continue
            matched.append(annotation)
            framework_counts[rule.framework] = framework_counts.get(rule.framework, 0) + 1

        if not framework_counts:
            return DetectionResult.empty(DetectionMethod.ANNOTATION)

        # Most matches wins; dicts keep insertion order so the first seen wins ties
        best_framework = max(framework_counts, key=framework_counts.get)
        confidence = DetectionAggregator.annotation_confidence(framework_counts[best_framework])

        logger.debug(
            f"AnnotationAnalyzer[{self.rule_set.name}]: {len(matched)} matches → "
            f"{best_framework} ({confidence})"
        )
        return DetectionResult(
            framework=best_framework,
            confidence=confidence,
            method=DetectionMethod.ANNOTATION,
            matched_annotations=tuple(matched),
        )
