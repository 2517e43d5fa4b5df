"""
Command-line interface for field mapping and record validation.

Usage:
    crm-quality map --source-fields <a,b,...> --destination-fields <x,y,...> [options]
    crm-quality validate --input <file_path> --object-type <type> [options]
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List

from crm_quality.batch import CleansingJobRunner, RunnerSettings
from crm_quality.batch.readers import CSVReader, FileReader
from crm_quality.core.dedup import DeduplicationTracker
from crm_quality.core.errors import CrmQualityError
from crm_quality.core.mapping import MappingResolver, review_suggestions, unmapped_destinations
from crm_quality.core.rules import RuleConfigLoader, RuleEngine, default_rules_for
from crm_quality.observability.logger import get_logger


logger = get_logger(__name__)


def _split_fields(value: str | None) -> List[str]:
    if not value:
        return []
    return [field.strip() for field in value.split(",") if field.strip()]


def _source_fields_from_file(file_path: str) -> List[str]:
    """Field names of a record file: the CSV header, or the keys of JSON records in first-seen order."""
    if FileReader.infer_format(file_path) == "csv":
        return CSVReader().read_header(file_path)

    fields: List[str] = []
    for record in FileReader().read(file_path):
        for key in record:
            if key not in fields:
                fields.append(key)
    return fields


def _emit(payload: Dict[str, Any], output: str | None) -> None:
    text = json.dumps(payload, indent=2, default=str)
    if output:
        Path(output).write_text(text + "\n", encoding="utf-8")
        logger.info(f"Wrote report to {output}")
    else:
        print(text)


def map_command(args) -> int:
    """
    Execute the field mapping command.

    Args:
        args: Command-line arguments
    """
    source_fields = _split_fields(args.source_fields)
    if args.source_file:
        source_fields.extend(f for f in _source_fields_from_file(args.source_file) if f not in source_fields)
    destination_fields = _split_fields(args.destination_fields)

    if not source_fields:
        logger.error("No source fields given (use --source-fields or --source-file)")
        return 1

    resolver = MappingResolver()
    suggestions = resolver.resolve(source_fields, destination_fields, args.object_type)
    reviews = review_suggestions(suggestions)

    _emit(
        {
            "object_type": args.object_type,
            "suggestions": [review.model_dump() for review in reviews],
            "unmapped_sources": [f for f in source_fields if f not in {s.source_field for s in suggestions}],
            "unmapped_destinations": unmapped_destinations(suggestions, destination_fields),
        },
        args.output,
    )
    return 0


def validate_command(args) -> int:
    """
    Execute the record validation command.

    Args:
        args: Command-line arguments
    """
    input_path = Path(args.input)
    if not input_path.exists():
        logger.error(f"Input file not found: {args.input}")
        return 1

    settings = RunnerSettings.from_env()
    overrides: Dict[str, Any] = {}
    if args.dedup_keys:
        overrides["dedup_keys"] = tuple(_split_fields(args.dedup_keys))
    if args.batch_size:
        overrides["batch_size"] = args.batch_size
    if args.checkpoint_interval:
        overrides["checkpoint_interval"] = args.checkpoint_interval
    if overrides:
        settings = RunnerSettings(**{**settings.model_dump(), **overrides})

    rules = [] if args.no_default_rules else default_rules_for(args.object_type)
    if args.validation_rules:
        rules.extend(RuleConfigLoader(args.validation_rules).load_rules())
    if not rules:
        logger.warning(f"No validation rules for object type '{args.object_type}'; only duplicates will be flagged")

    records = FileReader().read(input_path, file_format=args.format)
    logger.info(f"Read {len(records)} records from {args.input}")

    runner = CleansingJobRunner(
        RuleEngine(rules),
        tracker=DeduplicationTracker(settings.dedup_keys),
        object_type=args.object_type,
        settings=settings,
    )
    summary = runner.run(records)

    _emit(
        {
            "job": summary.job.model_dump(mode="json"),
            "quality": summary.metrics.model_dump(),
            "issues": [issue.model_dump() for issue in summary.issues],
        },
        args.output,
    )

    if args.fail_on_errors and summary.job.error_count > 0:
        return 2
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="crm-quality",
        description="CRM field mapping and data quality engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Suggest mappings between two schemas
  crm-quality map --source-fields "Email,Phone Number" --destination-fields "email,phone" \\
      --object-type contacts

  # Suggest mappings from the header of an export
  crm-quality map --source-file data/contacts.csv --destination-fields "email,firstName,lastName"

  # Validate a contact export with the built-in contact rules
  crm-quality validate --input data/contacts.csv --object-type contacts

  # Add custom rules and deduplicate on email then phone
  crm-quality validate --input data/contacts.json --object-type contacts \\
      --validation-rules config/validation_rules.yaml --dedup-keys email,phone
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Map command
    map_parser = subparsers.add_parser("map", help="Suggest source to destination field mappings")
    map_parser.add_argument(
        "--source-fields",
        help="Comma separated source field names"
    )
    map_parser.add_argument(
        "--source-file",
        help="CSV or JSON record file whose field names are used as source fields"
    )
    map_parser.add_argument(
        "--destination-fields",
        required=True,
        help="Comma separated destination field names"
    )
    map_parser.add_argument(
        "--object-type",
        default=None,
        help="Object type selecting the field pattern set (contacts, accounts, opportunities)"
    )
    map_parser.add_argument(
        "--output",
        help="Write the JSON report to this file instead of stdout"
    )

    # Validate command
    validate_parser = subparsers.add_parser("validate", help="Validate, deduplicate and score a record file")
    validate_parser.add_argument(
        "--input",
        required=True,
        help="Path to input file"
    )
    validate_parser.add_argument(
        "--object-type",
        required=True,
        help="Object type (contacts, accounts, opportunities, ...)"
    )
    validate_parser.add_argument(
        "--format",
        default=None,
        choices=["csv", "json"],
        help="Input file format (default: from the file suffix)"
    )
    validate_parser.add_argument(
        "--validation-rules",
        help="Path to extra validation rules (YAML or JSON)"
    )
    validate_parser.add_argument(
        "--no-default-rules",
        action="store_true",
        help="Do not apply the built-in rules of the object type"
    )
    validate_parser.add_argument(
        "--dedup-keys",
        help="Comma separated job-wide dedup key fields (default: CRM_QUALITY_DEDUP_KEYS or email)"
    )
    validate_parser.add_argument(
        "--batch-size",
        type=int,
        help="Records per batch"
    )
    validate_parser.add_argument(
        "--checkpoint-interval",
        type=int,
        help="Checkpoint every N records"
    )
    validate_parser.add_argument(
        "--fail-on-errors",
        action="store_true",
        help="Exit with status 2 when any record has issues"
    )
    validate_parser.add_argument(
        "--output",
        help="Write the JSON report to this file instead of stdout"
    )

    return parser


def main(argv: List[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    commands = {
        "map": map_command,
        "validate": validate_command,
    }

    try:
        return commands[args.command](args)
    except (CrmQualityError, ValueError) as e:
        logger.error(f"Error during {args.command}: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
