from core.rules_validator import (
    detect_annotation_overlaps,
    detect_duplicate_rule_sets,
    detect_pattern_overlaps,
    detect_redundant_patterns,
    main,
    print_validation_report,
)
from models.rule_set import make_rule_set
from rules.rules_loader import load_rules


def test_annotation_overlaps():
    rule_sets = [
        make_rule_set("Angular", {"Injectable": "injection", "Component": "ui"}),
        make_rule_set("NestJS", {"Injectable": "injection", "Controller": "web"}),
    ]
    assert detect_annotation_overlaps(rule_sets) == {"Injectable": ["Angular", "NestJS"]}


def test_pattern_overlaps():
    rule_sets = [
        make_rule_set("Angular", {}, [("rxjs", 60)]),
        make_rule_set("NestJS", {}, [("rxjs", 50), ("@nestjs/common", 95)]),
    ]
    assert detect_pattern_overlaps(rule_sets) == {"rxjs": ["Angular", "NestJS"]}


def test_duplicate_rule_sets():
    rule_sets = [make_rule_set("JUnit"), make_rule_set("Mockito"), make_rule_set("JUnit")]
    assert detect_duplicate_rule_sets(rule_sets) == ["JUnit"]


def test_redundant_patterns():
    rule_set = make_rule_set("Spring Boot", {}, [
        ("org.springframework.boot.*", 95),
        ("org.springframework.boot.autoconfigure.*", 90),
        ("org.springframework.web.*", 70),
        ("org.springframework.web.bind.annotation.*", 85),
    ])
    # The narrower web pattern is more confident, so it still matters
    assert detect_redundant_patterns([rule_set]) == {"Spring Boot": ["org.springframework.boot.autoconfigure.*"]}


def test_identical_patterns_flag_only_the_later_one():
    rule_set = make_rule_set("Lombok", {}, [("lombok.*", 95), ("lombok.*", 95)])
    assert detect_redundant_patterns([rule_set]) == {"Lombok": ["lombok.*"]}


def test_patterns_for_other_frameworks_not_redundant():
    rule_set = make_rule_set("Django", {}, [("rest_framework.*", 90), ("rest_framework.views", 80, "Django REST")])
    assert detect_redundant_patterns([rule_set]) == {}


def test_bundled_rules_have_no_duplicates():
    for language in ("java", "typescript", "python"):
        assert detect_duplicate_rule_sets(load_rules(language)) == []


def test_print_validation_report(capsys):
    rule_sets = [
        make_rule_set("Angular", {"Injectable": "injection"}, [("@angular/core", 95)]),
        make_rule_set("NestJS", {"Injectable": "injection"}, [("@nestjs/common", 95)]),
    ]
    print_validation_report("typescript", rule_sets)
    out = capsys.readouterr().out
    assert "RULES VALIDATION REPORT (typescript)" in out
    assert "ANNOTATION OVERLAPS: 1" in out
    assert "'Injectable' -> Angular, NestJS" in out
    assert "No pattern overlaps" in out


def test_main_runs_for_one_language(capsys):
    assert main(["--language", "java", "--no-verbose"]) == 0
    out = capsys.readouterr().out
    assert "RULES VALIDATION REPORT (java)" in out
    assert "(typescript)" not in out
