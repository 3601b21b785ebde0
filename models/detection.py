from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class DetectionMethod(str, Enum):
    """Which signal produced a detection."""
    ANNOTATION = "annotation"
    IMPORT = "import"
    COMBINED = "combined"


@dataclass(frozen=True)
class DetectionResult:
    """Framework attributed to a code entity, with its provenance."""
    framework: Optional[str]
    confidence: int  # 0-100, ordinal rather than a probability
    method: DetectionMethod
    matched_annotations: Tuple[str, ...] = ()
    matched_imports: Tuple[str, ...] = ()
    ambiguous_annotations: Tuple[str, ...] = ()

    def __post_init__(self):
        if not 0 <= self.confidence <= 100:
            raise ValueError(f"confidence {self.confidence} outside [0, 100]")
        if (self.framework is None) != (self.confidence == 0):
            raise ValueError(
                f"framework {self.framework!r} is inconsistent with confidence {self.confidence}"
            )
        object.__setattr__(self, "method", DetectionMethod(self.method))
        object.__setattr__(self, "matched_annotations", tuple(self.matched_annotations))
        object.__setattr__(self, "matched_imports", tuple(self.matched_imports))
        object.__setattr__(self, "ambiguous_annotations", tuple(self.ambiguous_annotations))

    @classmethod
    def empty(cls, method: DetectionMethod) -> "DetectionResult":
        return cls(framework=None, confidence=0, method=method)

    @property
    def is_empty(self) -> bool:
        return self.framework is None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "framework": self.framework,
            "confidence": self.confidence,
            "method": self.method.value,
        }
        if self.matched_annotations:
            data["matchedAnnotations"] = list(self.matched_annotations)
        if self.matched_imports:
            data["matchedImports"] = list(self.matched_imports)
        if self.ambiguous_annotations:
            data["ambiguousAnnotations"] = list(self.ambiguous_annotations)
        return data


@dataclass(frozen=True)
class AnnotationInfo:
    """Annotation record attached to a stored code entity."""
    name: str
    framework: Optional[str] = None
    category: Optional[str] = None  # e.g. "testing", "injection", "web"

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "framework": self.framework, "category": self.category}
