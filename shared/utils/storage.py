"""
JSON file persistence.
Writes go to a sibling temp file and are swapped in with os.replace, so a run that is
interrupted mid-write always leaves the previous document readable.
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Optional

from shared.utils.logging import get_logger

logger = get_logger(__name__)


def read_json_if_exists(path: Path) -> Optional[Any]:
    """Load JSON from path; None if the file is missing or unreadable."""
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        return None
    except (OSError, ValueError) as e:
        logger.warning("json_read_failed", path=str(path), error=str(e))
        return None


def write_json_atomic(path: Path, data: Any) -> None:
    """Write pretty-printed JSON via temp file + os.replace."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(path.name + ".tmp")
    with open(tmp, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
        f.write("\n")
    os.replace(tmp, path)
