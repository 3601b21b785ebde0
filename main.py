import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional, Tuple
from core.classifier import FrameworkClassifier
from core.classifier_registry import ClassifierRegistry, language_for_path
from core.context import DetectionContext
from core.errors import RuleSetError
from core.usage import summarize_framework_usage
from models.detection import AnnotationInfo, DetectionResult
from rules.rules_loader import available_languages


def _apply_threshold(result: DetectionResult, threshold: int) -> DetectionResult:
    if result.confidence < threshold:
        return DetectionResult.empty(result.method)
    return result


def _classify_entity(
    classifier: FrameworkClassifier, context: DetectionContext, threshold: int
) -> Tuple[Dict[str, Any], List[AnnotationInfo]]:
    result = _apply_threshold(classifier.with_context(context), threshold)
    infos = classifier.describe_annotations(context.annotations, result=result)
    data = result.to_dict()
    if context.file_path:
        data["filePath"] = context.file_path
    data["annotations"] = [info.to_dict() for info in infos]
    return data, infos


def _load_contexts(path: str) -> Tuple[List[DetectionContext], bool]:
    """Returns the contexts and whether the file held a list of entities."""
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    batch = isinstance(data, list)
    if not batch:
        data = [data]
    if not all(isinstance(item, dict) for item in data):
        raise ValueError("Context file must contain a JSON object or a list of objects")
    return [DetectionContext.from_dict(item) for item in data], batch


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Framework and annotation provenance classifier")
    parser.add_argument("--language", type=str, help="Source language (default: inferred from --file-path)")
    parser.add_argument("--annotation", type=str, nargs="+", default=[], dest="annotations", help="Annotation/decorator names without sigils (e.g., --annotation RestController Autowired)")
    parser.add_argument("--import", type=str, nargs="+", default=[], dest="imports", help="Imported module paths (e.g., --import org.springframework.boot.SpringApplication)")
    parser.add_argument("--file-path", type=str, help="Path of the source file the entity belongs to")
    parser.add_argument("--context-file", type=str, help="Path to JSON file with one entity {annotations, imports, filePath} or a list of them")
    parser.add_argument("--confidence-threshold", type=int, default=0, help="Report results below this confidence as undetected")
    parser.add_argument("--rules-dir", type=str, help="Directory containing <language>.yaml rule files")
    parser.add_argument("--list-frameworks", action="store_true", help="List the frameworks known for the language and exit")
    parser.add_argument("--stats", action="store_true", help="Print rule set statistics for the language and exit")
    parser.add_argument("--log-level", type=str, default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Logging verbosity level (default: WARNING)")
    args = parser.parse_args(argv)

    # Configure logging
    logging.basicConfig(
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        level=getattr(logging, args.log_level),
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    logger = logging.getLogger(__name__)

    contexts: List[DetectionContext] = []
    batch = False
    try:
        if args.context_file:
            contexts, batch = _load_contexts(args.context_file)
            logger.info(f"Loaded {len(contexts)} entities from {args.context_file}")
        elif args.annotations or args.imports:
            contexts = [DetectionContext.build(args.annotations, args.imports, args.file_path)]
    except FileNotFoundError:
        logger.error(f"Context file not found: {args.context_file}")
        return 1
    except OSError as e:
        logger.error(f"Could not read context file {args.context_file}: {e}")
        return 1
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in context file: {e}")
        return 1
    except (ValueError, KeyError, TypeError) as e:
        logger.error(f"Invalid context: {e}")
        return 1

    language = args.language
    if not language:
        for path in [args.file_path] + [c.file_path for c in contexts]:
            language = language_for_path(path) if path else None
            if language:
                break
    if not language:
        parser.error(f"--language is required (available: {', '.join(available_languages(args.rules_dir))})")

    try:
        classifier = ClassifierRegistry.get(language, args.rules_dir)
    except RuleSetError as e:
        logger.error(f"Could not load rules for {language}: {e}")
        return 1

    if args.list_frameworks:
        print(f"Frameworks for {language}:")
        for rule_set in classifier.rule_sets():
            print(f"  - {rule_set.name}")
        return 0

    if args.stats:
        print(json.dumps(classifier.get_statistics().to_dict(), indent=2))
        return 0

    if not contexts:
        parser.error("provide --annotation/--import or --context-file")

    logger.info(f"Classifying {len(contexts)} entities with the {language} classifier")
    entities = []
    infos: List[AnnotationInfo] = []
    for context in contexts:
        entity, entity_infos = _classify_entity(classifier, context, args.confidence_threshold)
        entities.append(entity)
        infos.extend(entity_infos)

    if batch:
        output: Any = {
            "entities": entities,
            "frameworkUsage": [usage.to_dict() for usage in summarize_framework_usage(infos)],
        }
    else:
        output = entities[0]

    print(json.dumps(output, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
