from typing import Iterable, List, Optional
import logging
from core.context import ImportLike, to_import_record
from models.detection import DetectionMethod, DetectionResult
from models.rule_set import ImportPattern, RuleSet


class ImportAnalyzer:
    def __init__(self, rule_set: RuleSet):
        self.rule_set = rule_set

    def analyze(self, imports: Iterable[ImportLike]) -> DetectionResult:
        logger = logging.getLogger(__name__)
        best: Optional[ImportPattern] = None
        matched_modules: List[str] = []

        for item in imports:
            module = to_import_record(item).module
            for pattern in self.rule_set.import_patterns:
                if not pattern.matches(module):
                    continue
                if module not in matched_modules:
                    matched_modules.append(module)
                # Strictly greater, so the first declared pattern wins ties
                if best is None or pattern.confidence > best.confidence:
                    best = pattern

        if best is None or best.confidence == 0:
            return DetectionResult.empty(DetectionMethod.IMPORT)

        logger.debug(
            f"ImportAnalyzer[{self.rule_set.name}]: {len(matched_modules)} imports matched, "
            f"best pattern {best.pattern} → {best.framework} ({best.confidence})"
        )
        return DetectionResult(
            framework=best.framework,
            confidence=best.confidence,
            method=DetectionMethod.IMPORT,
            matched_imports=tuple(matched_modules),
        )
