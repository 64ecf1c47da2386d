from __future__ import annotations

import json
from pathlib import Path
from typing import Mapping

from jsonschema import Draft202012Validator

from pogslam.engine.match import MatchConfig
from pogslam.engine.types import Striker


class RulesError(RuntimeError):
    pass


def _load_json(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise RulesError(f"Missing rules file: {path}") from e
    except json.JSONDecodeError as e:
        raise RulesError(f"Invalid JSON in {path}: {e}") from e


def validate_json(instance: object, schema: object, *, context: str) -> None:
    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(instance), key=lambda e: [str(p) for p in e.path])
    if errors:
        lines = [f"Schema validation failed for {context}:"]
        for err in errors[:10]:
            loc = "/".join(str(p) for p in err.absolute_path)
            lines.append(f"- {loc}: {err.message}")
        raise RulesError("\n".join(lines))


def _require_section(obj: Mapping[str, object], key: str) -> Mapping[str, object]:
    v = obj.get(key)
    if not isinstance(v, dict):
        raise RulesError(f"Expected object for {key}")
    return v


def _require_number(obj: Mapping[str, object], key: str) -> float:
    v = obj.get(key)
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        raise RulesError(f"Expected number for {key}")
    return float(v)


def _require_int(obj: Mapping[str, object], key: str) -> int:
    v = obj.get(key)
    if isinstance(v, bool) or not isinstance(v, int):
        raise RulesError(f"Expected int for {key}")
    return v


class RulesService:
    """Loads the tunable game constants from `rules.json`."""

    def __init__(self, data_dir: Path, schema_dir: Path, filename: str = "rules.json") -> None:
        self._data_dir = data_dir
        self._schema_dir = schema_dir
        self._filename = filename

    def _load(self) -> Mapping[str, object]:
        path = self._data_dir / self._filename
        raw = _load_json(path)
        schema = _load_json(self._schema_dir / "rules.schema.json")
        validate_json(raw, schema, context=str(path))
        if not isinstance(raw, dict):
            raise RulesError(f"{self._filename} must be an object")
        return raw

    def load_match_config(self) -> MatchConfig:
        raw = self._load()
        match = _require_section(raw, "match")
        sides = _require_section(raw, "sides")
        human = _require_section(sides, "human")
        computer = _require_section(sides, "computer")
        return MatchConfig(
            initial_count_per_side=_require_int(match, "initial_count_per_side"),
            rounds_to_win=_require_int(match, "rounds_to_win"),
            human_probability=_require_number(human, "flip_probability"),
            computer_probability=_require_number(computer, "flip_probability"),
            computer_delay=_require_number(match, "computer_delay"),
            auto_advance=bool(match.get("auto_advance", False)),
        )

    def load_striker(self) -> Striker:
        raw = self._load()
        s = _require_section(raw, "striker")
        material = s.get("material")
        sid = s.get("id")
        if not isinstance(material, str) or not isinstance(sid, str):
            raise RulesError("striker.id and striker.material must be strings")
        return Striker(id=sid, weight=_require_number(s, "weight"), material=material)  # type: ignore[arg-type]

    def validate_all(self) -> None:
        # Load is validation (schema + parse)
        _ = self.load_match_config()
        _ = self.load_striker()
