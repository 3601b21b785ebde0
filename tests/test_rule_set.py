import pytest
from core.errors import InvalidImportPatternError, RuleSetError
from models.rule_set import AnnotationRule, ImportPattern, RuleSet, make_rule_set


def test_make_rule_set_attributes_annotations_to_its_framework():
    rule_set = make_rule_set(
        "Lombok",
        {"Data": "codegen", "Builder": "codegen"},
        [("lombok.*", 95)],
    )
    assert rule_set.name == "Lombok"
    assert rule_set.detect_framework("Data") == "Lombok"
    assert rule_set.categorize_annotation("Builder") == "codegen"
    assert rule_set.detect_framework("Entity") is None
    assert rule_set.categorize_annotation("Entity") is None
    assert rule_set.import_patterns == (ImportPattern("lombok.*", 95, "Lombok"),)


def test_pattern_entries_accept_dicts_tuples_and_objects():
    rule_set = make_rule_set(
        "Django",
        {"api_view": "web"},
        [
            {"pattern": "django.*", "confidence": 95},
            ("rest_framework.*", 90, "Django"),
            ImportPattern("django.db.*", 90, "Django"),
        ],
    )
    assert [p.pattern for p in rule_set.import_patterns] == ["django.*", "rest_framework.*", "django.db.*"]
    assert all(p.framework == "Django" for p in rule_set.import_patterns)


def test_supported_annotations_and_categories_keep_declaration_order():
    rule_set = make_rule_set("JUnit", {"Test": "testing", "BeforeEach": "lifecycle", "Disabled": "testing"})
    assert rule_set.supported_annotations() == ["Test", "BeforeEach", "Disabled"]
    assert rule_set.supported_categories() == ["testing", "lifecycle"]


def test_rule_set_is_frozen_after_construction():
    source = {"Entity": "persistence"}
    rule_set = make_rule_set("JPA", source)
    source["Table"] = "persistence"
    assert rule_set.detect_framework("Table") is None
    with pytest.raises(TypeError):
        rule_set.annotation_map["Table"] = AnnotationRule("JPA", "persistence")


def test_annotation_claiming_another_framework_rejected():
    with pytest.raises(RuleSetError, match="only claim its own framework"):
        RuleSet(name="Angular", annotation_map={"Injectable": AnnotationRule("NestJS", "injection")})


def test_rule_set_without_name_rejected():
    with pytest.raises(RuleSetError):
        make_rule_set("", {"Test": "testing"})


def test_annotation_without_category_rejected():
    with pytest.raises(RuleSetError, match="needs a category"):
        make_rule_set("JUnit", {"Test": ""})


def test_malformed_pattern_names_framework():
    with pytest.raises(InvalidImportPatternError) as excinfo:
        make_rule_set("Spring Boot", {"Autowired": "injection"}, [("org.springframework.boot.*", 95), ("", 80)])
    assert excinfo.value.framework == "Spring Boot"
    assert "Spring Boot" in str(excinfo.value)


@pytest.mark.parametrize("confidence", [-1, 101, "95", 9.5, True])
def test_confidence_must_be_integer_in_range(confidence):
    with pytest.raises(InvalidImportPatternError):
        ImportPattern("lombok.*", confidence, "Lombok")


def test_invalid_pattern_error_is_a_rule_set_error():
    with pytest.raises(RuleSetError):
        make_rule_set("Lombok", {}, [("*", 95)])


def test_pattern_entry_without_confidence_rejected():
    with pytest.raises(InvalidImportPatternError, match="confidence"):
        make_rule_set("Lombok", {}, [{"pattern": "lombok.*"}])


def test_import_pattern_may_name_another_framework():
    rule_set = make_rule_set("Angular", {"Component": "ui"}, [("@ngrx/store", 70, "NgRx")])
    assert rule_set.import_patterns[0].framework == "NgRx"
    assert rule_set.import_patterns[0].matches("@ngrx/store")
