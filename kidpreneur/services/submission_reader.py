from pathlib import Path
from typing import Dict, List

from .submission_store import METADATA_FILENAME


def parse_metadata(text: str) -> Dict[str, str]:
    """Parse ``Label: value`` lines; only the first colon splits."""
    record = {}
    for line in text.split("\n"):
        label, _, value = line.partition(":")
        record[label.strip()] = value.strip()
    return record


def list_submissions(root: Path) -> List[Dict[str, str]]:
    """Read every stored submission under ``root``.

    Hidden entries (including in-flight staging dirs) and entries without a
    metadata file are skipped. Any OSError aborts the whole listing.
    """
    ideas = []
    for entry in Path(root).iterdir():
        if entry.name.startswith("."):
            continue
        metadata_path = entry / METADATA_FILENAME
        if not metadata_path.is_file():
            continue
        text = metadata_path.read_text(encoding="utf-8", errors="replace")
        ideas.append(parse_metadata(text))
    return ideas
