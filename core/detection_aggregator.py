"""Confidence combination for framework detections.

Annotation names on their own are often ambiguous (``Controller`` or
``Service`` exist in several ecosystems) while import paths are namespaced.
When both signals name the same framework their confidences add up; when
they disagree the more confident one is kept, and an exact tie goes to the
import-based result.
"""
from typing import Iterable
from models.detection import DetectionMethod, DetectionResult
import logging

logger = logging.getLogger(__name__)


class DetectionAggregator:
    """Combines and selects detection results."""

    # Each matched annotation is worth this much
    ANNOTATION_CONFIDENCE_PER_MATCH = 20
    # Annotations alone never reach certainty; leaves room for an import boost
    ANNOTATION_CONFIDENCE_CAP = 90
    MAX_CONFIDENCE = 100

    @staticmethod
    def annotation_confidence(match_count: int) -> int:
        """Confidence for ``match_count`` matched annotations of one framework."""
        return min(
            DetectionAggregator.ANNOTATION_CONFIDENCE_CAP,
            match_count * DetectionAggregator.ANNOTATION_CONFIDENCE_PER_MATCH,
        )

    @staticmethod
    def combine(annotation_result: DetectionResult, import_result: DetectionResult) -> DetectionResult:
        """
        Combine an annotation-based and an import-based result for the same scope.

        Args:
            annotation_result: Result computed from annotations
            import_result: Result computed from imports

        Returns:
            A ``combined`` result when both agree, otherwise the stronger of the two
        """
        if annotation_result.is_empty and import_result.is_empty:
            return DetectionResult.empty(DetectionMethod.COMBINED)

        if not annotation_result.is_empty and annotation_result.framework == import_result.framework:
            confidence = min(
                DetectionAggregator.MAX_CONFIDENCE,
                annotation_result.confidence + import_result.confidence,
            )
            logger.debug(
                f"Signals agree on {annotation_result.framework}: "
                f"{annotation_result.confidence} + {import_result.confidence} → {confidence}"
            )
            return DetectionResult(
                framework=annotation_result.framework,
                confidence=confidence,
                method=DetectionMethod.COMBINED,
                matched_annotations=annotation_result.matched_annotations,
                matched_imports=import_result.matched_imports,
            )

        # Import paths are namespaced, so they win ties
        if import_result.confidence >= annotation_result.confidence:
            return import_result
        return annotation_result

    @staticmethod
    def select_best(results: Iterable[DetectionResult], method: DetectionMethod) -> DetectionResult:
        """
        Pick the result with the strictly highest confidence.

        Results with confidence 0 are discarded; on an exact tie the earliest
        result wins. Returns the empty result labelled ``method`` if nothing remains.
        """
        best = None
        for result in results:
            if result.confidence <= 0:
                continue
            if best is None or result.confidence > best.confidence:
                best = result
        if best is None:
            return DetectionResult.empty(method)
        return best
