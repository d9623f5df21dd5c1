"""
Append-only Run Ledger (JSONL)

Purpose
- Keep an auditable record of every mapping run: what was mapped, and which
  side effects each element produced.
- Write one JSON object per line (JSONL) so logs are streamable and greppable.
- Never write raw result values; only presence codes and error text.

Contract
- Each event is an object with:
  - ts_utc: ISO8601 UTC timestamp string
  - run_id: caller-provided or created run id
  - seq: monotonically increasing integer per RunLedger instance
  - kind: short event type string ("run.start", "call.captured", "run.end")
  - data: JSON-serializable dict payload

Storage
- Opt-in: set COLLATERAL_RUN_DIR, or pass a RunLedger to a mapper.
- File: <run_dir>/<run_id>.jsonl
"""

from __future__ import annotations

import json
import os
import threading
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional


RUN_DIR_ENV = "COLLATERAL_RUN_DIR"


def _ts_utc() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def new_run_id() -> str:
    return uuid.uuid4().hex


def configured_run_dir() -> Optional[Path]:
    base = os.environ.get(RUN_DIR_ENV, "").strip()
    return Path(base) if base else None


@dataclass(frozen=True)
class LedgerPaths:
    run_dir: Path
    run_file: Path


def resolve_paths(run_id: str, run_dir: Optional[Path] = None) -> LedgerPaths:
    rd = Path(run_dir) if run_dir is not None else (configured_run_dir() or Path(".collateral/runs"))
    rf = rd / f"{run_id}.jsonl"
    return LedgerPaths(run_dir=rd, run_file=rf)


class RunLedger:
    """
    Append-only JSONL writer for a single run_id.
    Thread-safe within a process.
    """

    def __init__(self, run_id: Optional[str] = None, run_dir: Optional[Path] = None) -> None:
        self.run_id = run_id or new_run_id()
        self.paths = resolve_paths(self.run_id, run_dir=run_dir)
        self.paths.run_dir.mkdir(parents=True, exist_ok=True)

        self._lock = threading.Lock()
        self._seq = 0

    def event(self, kind: str, data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Append a single event line to the run file.
        Returns the event dict written.
        """
        if not isinstance(kind, str) or not kind.strip():
            raise ValueError("kind must be a non-empty string")

        payload: Dict[str, Any] = {
            "ts_utc": _ts_utc(),
            "run_id": self.run_id,
            "seq": None,  # filled under lock
            "kind": kind.strip(),
            "data": data or {},
        }

        with self._lock:
            self._seq += 1
            payload["seq"] = self._seq
            line = json.dumps(payload, ensure_ascii=False, separators=(",", ":")) + "\n"
            _append_text(self.paths.run_file, line)

        return payload

    def start(self, data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self.event("run.start", data=data)

    def end(self, data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self.event("run.end", data=data)

    def read_events(self) -> list:
        if not self.paths.run_file.exists():
            return []
        with self.paths.run_file.open("r", encoding="utf-8") as f:
            return [json.loads(line) for line in f if line.strip()]


def ledger_from_env() -> Optional[RunLedger]:
    """A fresh RunLedger under COLLATERAL_RUN_DIR, or None when unset."""
    rd = configured_run_dir()
    if rd is None:
        return None
    return RunLedger(run_dir=rd)


def _append_text(path: Path, text: str) -> None:
    # O_APPEND so concurrent writers never interleave within a line.
    flags = os.O_WRONLY | os.O_CREAT | os.O_APPEND
    fd = os.open(str(path), flags, 0o644)
    try:
        os.write(fd, text.encode("utf-8"))
        os.fsync(fd)
    finally:
        os.close(fd)
