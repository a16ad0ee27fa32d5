from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from cli.utils import compact_json, iter_ndjson
from receiver.mappers import FieldsHelper, PathResolutionError
from receiver.service_meta import ServiceMetaInfo


@dataclass
class InflateResult:
    """Result of inflating a batch of metadata documents."""
    source: str
    mapping_file: str
    records_inflated: int = 0
    records_skipped: int = 0
    records: List[Dict[str, Any]] = field(default_factory=list)
    errors: List[dict] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.records_inflated > 0 or self.records_skipped == 0


def load_helper(config: Optional[Path] = None, strict: bool = False) -> FieldsHelper:
    """Create and initialize a FieldsHelper for ServiceMetaInfo.

    Raises:
        ConfigError: if the mapping config is unreadable or invalid
        InitializationError: if the config names a field ServiceMetaInfo cannot set
    """
    helper = FieldsHelper(ServiceMetaInfo, strict=strict)
    helper.init(config)
    return helper


def inflate_document(file_path: Path, config: Optional[Path] = None, strict: bool = False) -> ServiceMetaInfo:
    """Inflate a single JSON metadata document.

    Raises:
        ValueError: if the file is not valid JSON
        PathResolutionError: if a mapped path is missing from the document
    """
    helper = load_helper(config, strict=strict)
    try:
        document = json.loads(file_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"{file_path} is not valid JSON: {exc}") from exc

    record = helper.new_record()
    helper.inflate(document, record)
    return record


def inflate_batch(
    file_path: Path,
    config: Optional[Path] = None,
    skip_errors: bool = False,
    strict: bool = False,
) -> InflateResult:
    """Inflate one ServiceMetaInfo per line of an NDJSON file.

    Args:
        file_path: NDJSON file, one metadata document per line
        config: Optional mapping config, defaults to the bundled one
        skip_errors: If True, skip undecodable or unresolvable lines instead of aborting
        strict: If True, non-textual terminal values are errors

    Returns:
        InflateResult with counts, records and errors
    """
    helper = load_helper(config, strict=strict)
    result = InflateResult(source=str(file_path), mapping_file=str(helper.mapping_file))

    for line_no, raw in iter_ndjson(file_path):
        try:
            document = json.loads(raw.decode("utf-8"))
            record = helper.new_record()
            helper.inflate(document, record)
        except (UnicodeDecodeError, json.JSONDecodeError, PathResolutionError) as exc:
            if skip_errors:
                result.records_skipped += 1
                result.errors.append({"line": line_no, "error": str(exc)})
                continue
            raise
        result.records.append(record.to_dict())
        result.records_inflated += 1

    return result


def print_mappings(helper: FieldsHelper) -> List[str]:
    """Format the loaded field mappings for CLI output."""
    lines = [f"Mappings from {helper.mapping_file}"]
    for field_name, mapping in helper.field_mappings.items():
        lines.append(f"  {field_name} <- {mapping.dotted_path}")
    return lines


def print_inflate_report(result: InflateResult, verbose: bool = False) -> List[str]:
    """Format an InflateResult for CLI output.

    Args:
        result: The InflateResult to format
        verbose: If True, print every record and every error

    Returns:
        List of formatted output lines
    """
    lines = []
    lines.append(f"\nInflating {result.source} (mappings: {result.mapping_file})")

    if verbose:
        for record in result.records:
            lines.append(f"  {compact_json(record)}")

    lines.append(f"  Inflated: {result.records_inflated} records")

    if result.records_skipped > 0:
        lines.append(f"  Skipped: {result.records_skipped} lines")
        errors = result.errors if verbose else result.errors[:1]
        for err in errors:
            lines.append(f"    Line {err['line']}: {err['error']}")

    return lines
