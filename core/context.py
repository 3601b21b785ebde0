from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Tuple, Union


@dataclass(frozen=True)
class ImportRecord:
    """One import statement as reported by a language parser."""
    module: str  # raw path as written, e.g. "org.springframework.boot.SpringApplication" or "@nestjs/common"
    imported_names: Tuple[str, ...] = ()

    def __post_init__(self):
        if not isinstance(self.module, str) or not self.module:
            raise ValueError(f"Import module must be a non-empty string, got {self.module!r}")
        if not isinstance(self.imported_names, (list, tuple)):
            raise ValueError(f"importedNames of {self.module!r} must be a list, got {self.imported_names!r}")
        names = tuple(self.imported_names)
        if not all(isinstance(name, str) for name in names):
            raise ValueError(f"importedNames of {self.module!r} must be strings, got {list(names)!r}")
        object.__setattr__(self, "imported_names", names)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ImportRecord":
        names = data.get("importedNames", data.get("imported_names", ()))
        return cls(module=data["module"], imported_names=names or ())


ImportLike = Union[ImportRecord, str, Dict[str, Any]]


def to_import_record(item: ImportLike) -> ImportRecord:
    if isinstance(item, ImportRecord):
        return item
    if isinstance(item, str):
        return ImportRecord(module=item)
    if isinstance(item, dict) and "module" in item:
        return ImportRecord.from_dict(item)
    raise ValueError(f"Cannot interpret import {item!r}, expected a module path or {{'module': ...}}")


def to_import_records(imports: Iterable[ImportLike]) -> Tuple[ImportRecord, ...]:
    if isinstance(imports, (str, dict)):
        raise ValueError(f"Imports must be a list, got {imports!r}")
    return tuple(to_import_record(item) for item in imports)


def normalize_annotations(annotations: Iterable[str]) -> Tuple[str, ...]:
    """Drop duplicates; unordered inputs are sorted so provenance is reproducible."""
    if isinstance(annotations, str):
        raise ValueError(f"Annotations must be a list of names, got the string {annotations!r}")
    unordered = isinstance(annotations, (set, frozenset))
    names = list(annotations)
    for name in names:
        if not isinstance(name, str) or not name:
            raise ValueError(f"Annotation names must be non-empty strings, got {name!r}")
    if unordered:
        return tuple(sorted(names))
    return tuple(dict.fromkeys(names))


@dataclass(frozen=True)
class DetectionContext:
    """Everything known about one code entity at classification time."""
    annotations: Tuple[str, ...] = ()
    imports: Tuple[ImportRecord, ...] = ()
    # Informational only, all entities of a file share its imports
    file_path: Optional[str] = None

    def __post_init__(self):
        if self.file_path is not None and not isinstance(self.file_path, str):
            raise ValueError(f"filePath must be a string, got {self.file_path!r}")
        object.__setattr__(self, "annotations", normalize_annotations(self.annotations))
        object.__setattr__(self, "imports", to_import_records(self.imports))

    @classmethod
    def build(
        cls,
        annotations: Iterable[str] = (),
        imports: Iterable[ImportLike] = (),
        file_path: Optional[str] = None,
    ) -> "DetectionContext":
        return cls(annotations=normalize_annotations(annotations), imports=to_import_records(imports), file_path=file_path)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DetectionContext":
        """Build a context from the JSON shape ``{annotations, imports, filePath}``."""
        return cls.build(
            annotations=data.get("annotations") or (),
            imports=data.get("imports") or (),
            file_path=data.get("filePath", data.get("file_path")),
        )
