from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from chatgpt_helper.llm.base import ChatMessage


@dataclass(frozen=True)
class TranscriptPaths:
    session_id: str
    jsonl_path: Path


def make_session_id() -> str:
    return datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")


def init_transcript(log_dir: Path, session_id: str) -> TranscriptPaths:
    log_dir.mkdir(parents=True, exist_ok=True)
    return TranscriptPaths(session_id=session_id, jsonl_path=log_dir / f"session_{session_id}.jsonl")


def append_turn(
    paths: TranscriptPaths,
    messages: Iterable[ChatMessage],
    *,
    usage: dict[str, Any] | None = None,
    extra: dict[str, Any] | None = None,
) -> None:
    """Append one JSON line holding the full conversation after a turn."""
    payload: dict[str, Any] = {
        "ts": datetime.now(timezone.utc).isoformat(),
        "session_id": paths.session_id,
        "messages": [m.to_dict() for m in messages],
    }
    if usage:
        payload["usage"] = usage
    if extra:
        payload.update(extra)
    with paths.jsonl_path.open("a", encoding="utf-8", newline="\n") as f:
        f.write(json.dumps(payload, ensure_ascii=False) + "\n")


def read_transcript(path: Path) -> list[dict[str, Any]]:
    if not path.exists():
        return []
    out: list[dict[str, Any]] = []
    for ln in path.read_text(encoding="utf-8", errors="replace").splitlines():
        ln = ln.strip()
        if not ln:
            continue
        try:
            out.append(json.loads(ln))
        except json.JSONDecodeError:
            continue
    return out
