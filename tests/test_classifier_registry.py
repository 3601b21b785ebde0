import threading

import pytest
from core.classifier import FrameworkClassifier
from core.classifier_registry import ClassifierRegistry, language_for_path
from core.errors import RuleSetError
from models.rule_set import make_rule_set


@pytest.mark.parametrize("path,language", [
    ("src/main/java/com/acme/App.java", "java"),
    ("src/app/app.component.ts", "typescript"),
    ("web/App.TSX", "typescript"),
    ("service/views.py", "python"),
    ("README.md", None),
    ("Makefile", None),
])
def test_language_for_path(path, language):
    assert language_for_path(path) == language


def test_get_builds_classifier_once():
    first = ClassifierRegistry.get("java")
    second = ClassifierRegistry.get("java")
    assert first is second
    assert first.language == "java"
    assert first.get_rule_set("Spring Boot") is not None
    assert ClassifierRegistry.languages() == ["java"]


def test_get_unknown_language_raises():
    with pytest.raises(RuleSetError):
        ClassifierRegistry.get("cobol")
    assert ClassifierRegistry.languages() == []


def test_register_custom_classifier():
    classifier = FrameworkClassifier("kotlin", [make_rule_set("Ktor", {"Serializable": "codegen"}, [("io.ktor.*", 95)])])
    assert ClassifierRegistry.register("kotlin", classifier) is classifier
    assert ClassifierRegistry.get("kotlin") is classifier


def test_register_overwrites_existing():
    ClassifierRegistry.register("kotlin", FrameworkClassifier("kotlin"))
    replacement = FrameworkClassifier("kotlin")
    ClassifierRegistry.register("kotlin", replacement)
    assert ClassifierRegistry.get("kotlin") is replacement
    assert ClassifierRegistry.languages() == ["kotlin"]


def test_concurrent_get_builds_single_instance():
    seen = []

    def fetch():
        seen.append(ClassifierRegistry.get("typescript"))

    threads = [threading.Thread(target=fetch) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len({id(c) for c in seen}) == 1
    assert ClassifierRegistry.languages() == ["typescript"]
