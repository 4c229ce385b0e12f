import os
import sys

import pytest

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from moving_tool.engine import PricingEngine, MoveLogistics, StateLoadError
from moving_tool.services.crew_service import CrewService
from moving_tool.services.job_service import JobService
from moving_tool.services.state_store import StateStore, AppState, SLOT_JOBS, SLOT_EMPLOYEES


def populated_state() -> AppState:
    state = AppState()
    jobs = JobService(state)
    crew = CrewService(state)

    logistics = MoveLogistics(use_credit_card=True, stairs_pickup=2, is_weekend=True)
    job = jobs.create_job_from_quote(
        logistics, PricingEngine().calculate(logistics), 'recommended', customer_name='Dana', tip=40
    )
    jobs.toggle_checklist(job.id, 'deposit')
    jobs.add_photo(job.id, 'data:image/png;base64,AAAA', 'before')
    crew.clock_toggle('e1')
    crew.add_receipt(amount=45, category='Fuel')
    crew.add_payroll_record('e2', 500, 'salary')
    state.settings.name = 'Northside Movers'
    return state


def test_missing_slots_use_seed_data(tmp_path):
    state = StateStore(tmp_path).load()
    assert state.jobs == []
    assert [e.id for e in state.employees] == ['e1', 'e2']
    assert state.settings.processing_fee_rate == 0.029


def test_round_trip(tmp_path):
    original = populated_state()
    store = StateStore(tmp_path)
    store.save(original)

    assert store.slot_path(SLOT_JOBS).exists()
    restored = store.load()

    assert restored.jobs == original.jobs
    assert restored.employees == original.employees
    assert restored.crews == original.crews
    assert restored.receipts == original.receipts
    assert restored.time_entries == original.time_entries
    assert restored.settings.name == 'Northside Movers'
    assert restored.jobs[0].pricing.tip == 40


def test_corrupt_slot(tmp_path):
    StateStore(tmp_path).save(AppState())
    (tmp_path / f"{SLOT_EMPLOYEES}.json").write_text("{not json", encoding='utf-8')

    with pytest.raises(StateLoadError) as exc:
        StateStore(tmp_path).load()
    assert exc.value.slot == SLOT_EMPLOYEES


def test_wrong_shape_slot(tmp_path):
    (tmp_path / f"{SLOT_JOBS}.json").write_text('{"id": "x"}', encoding='utf-8')
    with pytest.raises(StateLoadError):
        StateStore(tmp_path).load()
