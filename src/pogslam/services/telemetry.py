from __future__ import annotations

import json
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Mapping


@dataclass
class TelemetryService:
    """Append-only JSON-lines event sink for the client."""

    path: Path
    session: str = field(default_factory=lambda: uuid.uuid4().hex)

    def log(self, event_type: str, payload: Mapping[str, object]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        rec = {
            "ts": datetime.now(tz=timezone.utc).isoformat(),
            "session": self.session,
            "type": event_type,
            "payload": dict(payload),
        }
        with self.path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(rec, ensure_ascii=False) + "\n")

    def log_engine_events(self, events: list[dict[str, object]]) -> None:
        """Forward round and match results from an engine event log slice."""
        for ev in events:
            kind = ev.get("type")
            if kind not in ("ROUND_ENDED", "MATCH_ENDED"):
                continue
            self.log(str(kind).lower(), {k: v for k, v in ev.items() if k != "type"})
