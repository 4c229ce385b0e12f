"""
State Store - Application state and its JSON snapshot on disk.

Each collection lives in its own named slot file under the data directory.
Loading and saving happen at process boundaries only; services mutate the
in-memory AppState and never touch disk.
"""
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

from ..engine.errors import StateLoadError
from ..engine.models import CompanySettings
from .crew_service import Employee, Crew, TimeEntry, Receipt, seed_employees, seed_crews
from .job_service import Job

logger = logging.getLogger(__name__)


SLOT_JOBS = 'ss_jobs_v3'
SLOT_TIME = 'ss_time_v3'
SLOT_EMPLOYEES = 'ss_employees_v3'
SLOT_CREWS = 'ss_crews_v3'
SLOT_RECEIPTS = 'ss_receipts_v3'
SLOT_SETTINGS = 'ss_settings_v3'


@dataclass
class AppState:
    """Everything the dashboard works on, passed explicitly to each service."""
    settings: CompanySettings = field(default_factory=CompanySettings)
    jobs: list[Job] = field(default_factory=list)
    employees: list[Employee] = field(default_factory=seed_employees)
    crews: list[Crew] = field(default_factory=seed_crews)
    receipts: list[Receipt] = field(default_factory=list)
    time_entries: list[TimeEntry] = field(default_factory=list)


# slot -> (state attribute, record class)
COLLECTION_SLOTS = {
    SLOT_JOBS: ('jobs', Job),
    SLOT_TIME: ('time_entries', TimeEntry),
    SLOT_EMPLOYEES: ('employees', Employee),
    SLOT_CREWS: ('crews', Crew),
    SLOT_RECEIPTS: ('receipts', Receipt),
}


class StateStore:
    """Snapshot/restore of AppState as one JSON file per slot."""

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)

    def slot_path(self, slot: str) -> Path:
        return self.data_dir / f"{slot}.json"

    def _read_slot(self, slot: str):
        path = self.slot_path(slot)
        if not path.exists():
            return None
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StateLoadError(slot, str(e)) from e

    def load(self) -> AppState:
        """Restore state; missing slots keep their seed/default values."""
        state = AppState()

        settings_data = self._read_slot(SLOT_SETTINGS)
        if settings_data is not None:
            try:
                state.settings = CompanySettings.from_dict(settings_data)
            except TypeError as e:
                raise StateLoadError(SLOT_SETTINGS, str(e)) from e

        for slot, (attr, record_cls) in COLLECTION_SLOTS.items():
            data = self._read_slot(slot)
            if data is None:
                continue
            if not isinstance(data, list):
                raise StateLoadError(slot, f"expected a list, got {type(data).__name__}")
            try:
                setattr(state, attr, [record_cls.from_dict(item) for item in data])
            except (KeyError, TypeError, ValueError) as e:
                raise StateLoadError(slot, str(e)) from e

        logger.info(
            "Loaded state from %s: %d jobs, %d employees, %d crews",
            self.data_dir, len(state.jobs), len(state.employees), len(state.crews),
        )
        return state

    def save(self, state: AppState):
        """Write every slot."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self._write_slot(SLOT_SETTINGS, state.settings.to_dict())
        for slot, (attr, _) in COLLECTION_SLOTS.items():
            self._write_slot(slot, [item.to_dict() for item in getattr(state, attr)])
        logger.info("Saved state to %s", self.data_dir)

    def _write_slot(self, slot: str, payload):
        path = self.slot_path(slot)
        tmp = path.with_suffix('.json.tmp')
        with open(tmp, 'w', encoding='utf-8') as f:
            json.dump(payload, f, indent=2)
        tmp.replace(path)

