"""Saved-plan repository backed by a JSON file.

The calculation engine never touches this module; callers load a stored
``FinancialInputs`` snapshot and hand it to the engine like any other input.
"""
from __future__ import annotations

import json
import logging
import os
import secrets
import string
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from villaplan.calculators import DEFAULT_INPUTS
from villaplan.models import FinancialInputs

logger = logging.getLogger(__name__)

SCENARIO_FILE = os.environ.get("VILLAPLAN_SCENARIO_FILE", "scenarios.json")

_ID_ALPHABET = string.ascii_lowercase + string.digits


class StorageError(RuntimeError):
    """The scenario file could not be written."""


class ScenarioImportError(ValueError):
    """Imported JSON is not a list of saved scenarios."""


class SavedScenario(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    inputs: FinancialInputs
    created_at: str
    updated_at: str


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def generate_id() -> str:
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
    return f"scenario-{int(time.time() * 1000)}-{suffix}"


class ScenarioStore:
    """CRUD, default pointer and JSON import/export for saved plans.

    ``path=None`` keeps everything in memory, which is what the tests and
    throwaway sessions use.
    """

    def __init__(self, path: Optional[str] = None) -> None:
        self.path = path
        self._memory: Dict[str, Any] = {"scenarios": [], "default_id": None}

    # -- raw persistence ---------------------------------------------------

    def _read(self) -> Dict[str, Any]:
        if self.path is None:
            return self._memory
        if not os.path.exists(self.path):
            return {"scenarios": [], "default_id": None}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            logger.error("Failed to load scenarios from %s: %s", self.path, exc)
            return {"scenarios": [], "default_id": None}
        if not isinstance(data, dict):
            logger.error("Ignoring malformed scenario file %s", self.path)
            return {"scenarios": [], "default_id": None}
        if not isinstance(data.get("scenarios", []), list):
            logger.error("Ignoring malformed scenario list in %s", self.path)
            data["scenarios"] = []
        data.setdefault("scenarios", [])
        data.setdefault("default_id", None)
        return data

    def _write(self, data: Dict[str, Any]) -> None:
        if self.path is None:
            self._memory = data
            return
        try:
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
        except OSError as exc:
            logger.error("Failed to save scenarios to %s: %s", self.path, exc)
            raise StorageError("Could not save scenarios. Storage might be full.") from exc

    def _load(self) -> List[SavedScenario]:
        scenarios = []
        for raw in self._read()["scenarios"]:
            try:
                scenarios.append(SavedScenario.model_validate(raw))
            except ValidationError as exc:
                logger.warning(
                    "Skipping unreadable scenario %r: %s", raw.get("id") if isinstance(raw, dict) else raw, exc
                )
        return scenarios

    def _save(self, scenarios: List[SavedScenario], default_id: Optional[str] = None, keep_default=True) -> None:
        data = self._read()
        data["scenarios"] = [s.model_dump(mode="json", by_alias=True) for s in scenarios]
        if not keep_default:
            data["default_id"] = default_id
        self._write(data)

    # -- CRUD --------------------------------------------------------------

    def list(self) -> List[SavedScenario]:
        return self._load()

    def get(self, scenario_id: str) -> Optional[SavedScenario]:
        return next((s for s in self._load() if s.id == scenario_id), None)

    def create(self, name: str, inputs: FinancialInputs) -> SavedScenario:
        stamp = _now()
        scenario = SavedScenario(id=generate_id(), name=name, inputs=inputs, created_at=stamp, updated_at=stamp)
        scenarios = self._load()
        scenarios.append(scenario)
        self._save(scenarios)
        logger.info("Created scenario %s (%s)", scenario.id, name)
        return scenario

    def update(
        self,
        scenario_id: str,
        name: Optional[str] = None,
        inputs: Optional[FinancialInputs] = None,
    ) -> Optional[SavedScenario]:
        """Change name and/or inputs; ``None`` when the id is unknown."""
        scenarios = self._load()
        for idx, s in enumerate(scenarios):
            if s.id != scenario_id:
                continue
            changes: Dict[str, Any] = {"updated_at": _now()}
            if name is not None:
                changes["name"] = name
            if inputs is not None:
                changes["inputs"] = inputs
            scenarios[idx] = s.model_copy(update=changes)
            self._save(scenarios)
            return scenarios[idx]
        return None

    def rename(self, scenario_id: str, new_name: str) -> Optional[SavedScenario]:
        return self.update(scenario_id, name=new_name)

    def duplicate(self, scenario_id: str, new_name: Optional[str] = None) -> Optional[SavedScenario]:
        source = self.get(scenario_id)
        if source is None:
            return None
        return self.create(new_name or f"{source.name} (copy)", source.inputs)

    def delete(self, scenario_id: str) -> bool:
        scenarios = self._load()
        remaining = [s for s in scenarios if s.id != scenario_id]
        if len(remaining) == len(scenarios):
            return False
        if self.get_default_id() == scenario_id:
            self._save(remaining, default_id=None, keep_default=False)
        else:
            self._save(remaining)
        logger.info("Deleted scenario %s", scenario_id)
        return True

    # -- default pointer ---------------------------------------------------

    def set_default(self, scenario_id: str) -> None:
        data = self._read()
        data["default_id"] = scenario_id
        self._write(data)

    def get_default_id(self) -> Optional[str]:
        return self._read().get("default_id")

    def clear_default(self) -> None:
        data = self._read()
        data["default_id"] = None
        self._write(data)

    def get_default(self) -> Optional[SavedScenario]:
        scenario_id = self.get_default_id()
        if not scenario_id:
            return None
        return self.get(scenario_id)

    # -- bulk --------------------------------------------------------------

    def export_json(self) -> str:
        return json.dumps([s.model_dump(mode="json", by_alias=True) for s in self._load()], indent=2)

    def import_json(self, text: str, merge: bool = True) -> int:
        """Add scenarios from an exported JSON array and return how many.

        Imported entries get fresh ids and timestamps so they never collide
        with existing ones.  ``merge=False`` replaces the whole store.
        """
        try:
            imported = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ScenarioImportError("Could not import scenarios. Invalid JSON.") from exc
        if not isinstance(imported, list):
            raise ScenarioImportError("Invalid format: expected array of scenarios")

        fresh = []
        for raw in imported:
            if not isinstance(raw, dict) or not raw.get("id") or not raw.get("name") or not raw.get("inputs"):
                raise ScenarioImportError("Invalid scenario structure")
            try:
                inputs = FinancialInputs.model_validate(raw["inputs"])
            except ValidationError as exc:
                raise ScenarioImportError(f"Invalid inputs in scenario {raw['name']!r}") from exc
            stamp = _now()
            fresh.append(SavedScenario(id=generate_id(), name=raw["name"], inputs=inputs, created_at=stamp, updated_at=stamp))

        scenarios = self._load() if merge else []
        if merge:
            self._save(scenarios + fresh)
        else:
            self._save(fresh, default_id=None, keep_default=False)
        logger.info("Imported %d scenario(s)", len(fresh))
        return len(fresh)

    def clear_all(self) -> None:
        self._write({"scenarios": [], "default_id": None})

    def initialize_default(self) -> Optional[SavedScenario]:
        """Seed an empty store with the baseline plan and mark it default."""
        if self._load():
            return None
        scenario = self.create("Default Plan", DEFAULT_INPUTS)
        self.set_default(scenario.id)
        return scenario
