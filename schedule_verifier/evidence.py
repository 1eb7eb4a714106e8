"""Loaders for curated groups and the on-disk evidence written by earlier pipeline steps."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from shared.models.domain import EventGroup
from shared.utils.logging import get_logger
from shared.utils.storage import read_json_if_exists

logger = get_logger(__name__)

RSS_DIGEST_FILE = "rss-digest.json"
SPORT_DATA_SPORTS = ("football", "golf", "tennis", "f1", "chess", "esports")


def load_curated_groups(config_dir: Path) -> list[EventGroup]:
    """Every *.json in config_dir with a non-empty events list, sorted by file name."""
    config_dir = Path(config_dir)
    if not config_dir.is_dir():
        logger.warning("config_dir_missing", path=str(config_dir))
        return []

    groups: list[EventGroup] = []
    for path in sorted(config_dir.glob("*.json")):
        data = read_json_if_exists(path)
        if not isinstance(data, dict):
            continue
        if not isinstance(data.get("events"), list) or not data["events"]:
            continue
        try:
            groups.append(EventGroup.model_validate({**data, "file": path.name}))
        except ValidationError as e:
            logger.warning("group_file_unreadable", path=str(path), error=str(e))
    return groups


def load_rss_digest(data_dir: Path) -> Optional[dict[str, Any]]:
    digest = read_json_if_exists(Path(data_dir) / RSS_DIGEST_FILE)
    return digest if isinstance(digest, dict) else None


def load_sport_data(data_dir: Path) -> dict[str, dict[str, Any]]:
    sport_data: dict[str, dict[str, Any]] = {}
    for sport in SPORT_DATA_SPORTS:
        data = read_json_if_exists(Path(data_dir) / f"{sport}.json")
        if isinstance(data, dict):
            sport_data[sport] = data
    return sport_data
