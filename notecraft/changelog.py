from __future__ import annotations
from typing import Dict, Any, List
from datetime import datetime, timezone
from pathlib import Path
import json
import logging

logger = logging.getLogger(__name__)

# Debug logs are emptied once they grow past this size
MAX_LOG_FILE_SIZE = 5 * 1024 * 1024

TOPIC_LOG_NAME = "topic_processing_log.md"
SUMMARY_LOG_NAME = "summarization_log.md"


def write_json(path: str, payload: Dict[str, Any]) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2)

def write_txt(path: str, payload: Dict[str, Any]) -> None:
    with open(path, "w", encoding="utf-8") as f:
        f.write(render_txt(payload))

def render_txt(payload: Dict[str, Any]) -> str:
    lines: List[str] = []
    lines.append(f"notecraft run at {payload.get('timestamp_utc')}")
    lines.append(f"Feature: {payload.get('feature')}")
    lines.append("")
    stats = payload.get("stats", {})
    lines.append("Stats")
    for k, v in stats.items():
        lines.append(f"- {k}: {v}")
    lines.append("")
    docs = payload.get("documents", []) or []
    if docs:
        lines.append("Documents")
        for d in docs:
            line = f"- [{d['status'].upper()}] {d['path']} ({d['iterations']} iterations, {d['transform_calls']} calls)"
            if d.get("message"):
                line += f": {d['message']}"
            lines.append(line)
            if d.get("backup"):
                lines.append(f"  backup: {d['backup']}")
    return "\n".join(lines)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


class DebugLog:
    """Appends transform inputs and outputs to Markdown files in log_dir."""

    def __init__(self, log_dir: str):
        self.log_dir = Path(log_dir)

    def _append(self, name: str, message: str) -> None:
        path = self.log_dir / name
        try:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            if path.exists() and path.stat().st_size > MAX_LOG_FILE_SIZE:
                path.write_text("", encoding="utf-8")
                logger.info(f"Log file truncated: {path}")
            with open(path, "a", encoding="utf-8") as f:
                f.write(message)
        except OSError as e:
            # Debug logging must never break a run
            logger.error(f"Error writing log entry to {path}: {e}")

    def topic_iteration(self, block: str, processed: str, iteration: int) -> None:
        ts = _timestamp()
        self._append(TOPIC_LOG_NAME, (
            f"\n## Block {iteration}\n\n_{ts}_\n\n{block}\n"
            f"\n## Processed Block {iteration}\n\n_{ts}_\n\n{processed}\n"
        ))

    def summary_round(self, blocks: List[str], processed: List[str], round_number: int) -> None:
        parts = [f"\n## Round {round_number} Before\n\n_{_timestamp()}_\n\n---\n"]
        for i, block in enumerate(blocks, start=1):
            parts.append(f"Block {i}:\n\n{block}\n\n---\n")
        parts.append(f"\n## Round {round_number} After\n\n---\n")
        for i, block in enumerate(processed, start=1):
            parts.append(f"Processed Block {i}:\n\n{block}\n\n---\n")
        self._append(SUMMARY_LOG_NAME, "".join(parts))
