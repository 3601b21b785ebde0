import os
import logging
import yaml
from typing import Any, Dict, List, Optional
from core.errors import InvalidImportPatternError, RuleSetError
from models.rule_set import RuleSet, make_rule_set

logger = logging.getLogger(__name__)

RULES_DIR = os.path.dirname(os.path.abspath(__file__))
RULE_FILE_EXTENSIONS = (".yaml", ".yml")


def _rules_path(language: str, rules_dir: str) -> Optional[str]:
    for ext in RULE_FILE_EXTENSIONS:
        path = os.path.join(rules_dir, f"{language}{ext}")
        if os.path.exists(path):
            return path
    return None


def available_languages(rules_dir: Optional[str] = None) -> List[str]:
    """Languages that have a rules file in ``rules_dir``."""
    rules_dir = rules_dir or RULES_DIR
    languages = []
    for filename in sorted(os.listdir(rules_dir)):
        stem, ext = os.path.splitext(filename)
        if ext in RULE_FILE_EXTENSIONS and stem not in languages:
            languages.append(stem)
    return languages


def _parse_rule_set(entry: Any, filename: str, index: int) -> RuleSet:
    if not isinstance(entry, dict) or not entry.get("name"):
        raise RuleSetError(f"{filename}: entry #{index} must be a mapping with a 'name'")

    name = entry["name"]
    annotations = entry.get("annotations") or {}
    if not isinstance(annotations, dict):
        raise RuleSetError(f"{filename}: 'annotations' of '{name}' must map annotation to category")
    imports = entry.get("imports") or []
    if not isinstance(imports, list):
        raise RuleSetError(f"{filename}: 'imports' of '{name}' must be a list")

    try:
        return make_rule_set(name, annotations, imports)
    except InvalidImportPatternError as e:
        raise InvalidImportPatternError(e.pattern, e.framework, f"{e.reason} [{filename}]") from e
    except RuleSetError as e:
        raise RuleSetError(f"{filename}: {e}") from e


def load_rules(language: str, rules_dir: Optional[str] = None) -> List[RuleSet]:
    """
    Loads the rule sets for one language from ``<rules_dir>/<language>.yaml``.

    Raises:
        RuleSetError: if the file is missing, unreadable or contains a malformed entry
    """
    rules_dir = rules_dir or RULES_DIR
    filepath = _rules_path(language, rules_dir)
    if filepath is None:
        raise RuleSetError(f"No rules file for language '{language}' in {rules_dir}")

    filename = os.path.basename(filepath)
    with open(filepath, "r", encoding="utf-8") as f:
        try:
            rules_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise RuleSetError(f"{filename}: invalid YAML: {e}") from e

    if not rules_data:
        logger.warning(f"Rules file {filename} is empty")
        return []
    if not isinstance(rules_data, list):
        raise RuleSetError(f"{filename}: expected a list of rule sets")

    rule_sets = [_parse_rule_set(entry, filename, i) for i, entry in enumerate(rules_data)]
    logger.info(f"Loaded {len(rule_sets)} {language} rule sets from {filename}")
    return rule_sets


def load_all_rules(rules_dir: Optional[str] = None) -> Dict[str, List[RuleSet]]:
    """Loads every language's rule sets found in ``rules_dir``."""
    return {language: load_rules(language, rules_dir) for language in available_languages(rules_dir)}
