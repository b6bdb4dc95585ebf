"""
Plain-text export of a translated item.
"""

import os
from datetime import datetime
from typing import Optional

from linguavision.core.models import BatchItem, ItemStatus, TranslationResult

RULE = "-----------------------------------"


def artifact_filename(source_filename: str) -> str:
    """Download name for an item: ``translation-<name>.txt``"""
    return f"translation-{source_filename}.txt"


def render_result_text(filename: str, result: TranslationResult,
                       timestamp: Optional[datetime] = None) -> str:
    """
    Render a translation as the downloadable text artifact.

    A header (file, detected language, date) is followed by one
    ``[Original]``/``[English]`` block per segment, blocks separated by a rule.
    """
    timestamp = timestamp or datetime.now()
    header = (
        f"File: {filename}\n"
        f"Source Language: {result.detected_language}\n"
        f"Date: {timestamp.strftime('%Y-%m-%d %H:%M:%S')}\n\n"
        f"{RULE}\n\n"
    )
    body = f"\n\n{RULE}\n\n".join(
        f"[Original]\n{segment.source}\n\n[English]\n{segment.target}"
        for segment in result.segments
    )
    return header + body


def render_item(item: BatchItem, timestamp: Optional[datetime] = None) -> str:
    """Render a SUCCESS item; raises ValueError for any other status"""
    if item.status is not ItemStatus.SUCCESS or item.result is None:
        raise ValueError(f"Item {item.id} has no translation to export")
    return render_result_text(item.filename, item.result, timestamp)


def write_item(item: BatchItem, output_dir: str) -> str:
    """Write the artifact of a SUCCESS item, returns the file path"""
    os.makedirs(output_dir, exist_ok=True)
    path = os.path.join(output_dir, artifact_filename(item.filename))
    with open(path, 'w', encoding='utf-8') as f:
        f.write(render_item(item))
    return path
