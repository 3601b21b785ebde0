"""Framework and category usage summaries over stored annotation records."""
from dataclasses import dataclass, field
from typing import Dict, Iterable, List
from models.detection import AnnotationInfo


@dataclass
class FrameworkUsage:
    framework: str
    total_usage: int = 0
    annotations: Dict[str, int] = field(default_factory=dict)
    categories: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return {
            "framework": self.framework,
            "totalUsage": self.total_usage,
            "annotations": [
                {"name": name, "usageCount": count}
                for name, count in sorted(self.annotations.items(), key=lambda kv: (-kv[1], kv[0]))
            ],
            "categories": list(self.categories),
        }


def summarize_framework_usage(infos: Iterable[AnnotationInfo]) -> List[FrameworkUsage]:
    """
    Count annotation usage per framework, most used first.

    Records without a framework are skipped.
    """
    by_framework: Dict[str, FrameworkUsage] = {}
    for info in infos:
        if not info.framework:
            continue
        usage = by_framework.get(info.framework)
        if usage is None:
            usage = by_framework[info.framework] = FrameworkUsage(framework=info.framework)
        usage.total_usage += 1
        usage.annotations[info.name] = usage.annotations.get(info.name, 0) + 1
        if info.category and info.category not in usage.categories:
            usage.categories.append(info.category)

    return sorted(by_framework.values(), key=lambda u: (-u.total_usage, u.framework))


def summarize_category_usage(infos: Iterable[AnnotationInfo]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for info in infos:
        if info.category:
            counts[info.category] = counts.get(info.category, 0) + 1
    return dict(sorted(counts.items(), key=lambda kv: (-kv[1], kv[0])))
