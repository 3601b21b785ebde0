"""Process-wide registry holding one framework classifier per source language."""
import logging
import os
import threading
from typing import Dict, List, Optional
from core.classifier import FrameworkClassifier
from rules.rules_loader import load_rules

logger = logging.getLogger(__name__)

# File extension -> language of the rules file used to classify it
LANGUAGE_BY_EXTENSION = {
    ".java": "java",
    ".ts": "typescript",
    ".tsx": "typescript",
    ".js": "typescript",
    ".jsx": "typescript",
    ".mjs": "typescript",
    ".cjs": "typescript",
    ".py": "python",
    ".pyi": "python",
}


def language_for_path(file_path: str) -> Optional[str]:
    """Guess the classifier language from a source file's extension."""
    _, ext = os.path.splitext(file_path)
    return LANGUAGE_BY_EXTENSION.get(ext.lower())


class ClassifierRegistry:
    """Registry of long-lived classifiers, built once per language and then reused."""

    _classifiers: Dict[str, FrameworkClassifier] = {}
    _order: List[str] = []  # Preserve registration order
    _lock = threading.Lock()

    @classmethod
    def register(cls, language: str, classifier: FrameworkClassifier) -> FrameworkClassifier:
        """Install a classifier for ``language``, replacing any existing one.

        Example:
            ClassifierRegistry.register("kotlin", FrameworkClassifier("kotlin", rule_sets))
        """
        with cls._lock:
            if language in cls._classifiers:
                logger.warning(f"Classifier for '{language}' already registered, overwriting")
            else:
                cls._order.append(language)
            cls._classifiers[language] = classifier
        logger.debug(f"Registered classifier: {language} ({len(classifier.rule_sets())} rule sets)")
        return classifier

    @classmethod
    def get(cls, language: str, rules_dir: Optional[str] = None) -> FrameworkClassifier:
        """
        Get the classifier for ``language``, loading its rules file on first use.

        Raises:
            RuleSetError: if no valid rules exist for the language
        """
        classifier = cls._classifiers.get(language)
        if classifier is not None:
            return classifier

        with cls._lock:
            # Another thread may have built it while we waited
            classifier = cls._classifiers.get(language)
            if classifier is None:
                classifier = FrameworkClassifier(language, load_rules(language, rules_dir))
                cls._classifiers[language] = classifier
                cls._order.append(language)
        return classifier

    @classmethod
    def languages(cls) -> List[str]:
        """Languages with a classifier, in registration order."""
        return cls._order.copy()

    @classmethod
    def clear(cls):
        """Drop all classifiers (useful for testing)."""
        with cls._lock:
            cls._classifiers.clear()
            cls._order.clear()
