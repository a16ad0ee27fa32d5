from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterator, Tuple


def iter_ndjson(path: Path) -> Iterator[Tuple[int, bytes]]:
    """Yield (line number, raw bytes) for each non-blank line; decoding is left to the caller."""
    with path.open("rb") as handle:
        for line_no, line in enumerate(handle, start=1):
            line = line.strip()
            if not line:
                continue
            yield line_no, line


def compact_json(data: Dict[str, Any]) -> str:
    return json.dumps(data, separators=(",", ":"), sort_keys=True)
