"""
Shared API state - the loaded AppState and the services bound to it.
"""
from fastapi import Depends

from ..config.settings import get_settings
from ..engine import PricingEngine
from ..services.crew_service import CrewService
from ..services.job_service import JobService
from ..services.state_store import AppState, StateStore

settings = get_settings()
store = StateStore(settings.data_dir)
app_state = store.load()


def get_state() -> AppState:
    return app_state


def get_engine(state: AppState = Depends(get_state)) -> PricingEngine:
    return PricingEngine(state.settings)


def get_job_service(state: AppState = Depends(get_state)) -> JobService:
    return JobService(
        state,
        at_risk_score=settings.at_risk_score,
        dashboard_at_risk_score=settings.dashboard_at_risk_score,
    )


def get_crew_service(state: AppState = Depends(get_state)) -> CrewService:
    return CrewService(state)
