"""
Jobs API - FastAPI router for leads, jobs and the dispatch board.
"""
from fastapi import APIRouter, Depends, HTTPException
from fastapi.encoders import jsonable_encoder
from typing import Optional

from ..engine import PricingEngine, MoveLogistics, InvalidInputError, NotFoundError
from ..services.job_service import JobService
from .schemas import JobCreate, StatusUpdate, CrewAssign
from .state import get_engine, get_job_service

router = APIRouter(prefix="/api/jobs", tags=["jobs"])


def _job_out(service: JobService, job) -> dict:
    data = jsonable_encoder(job)
    data['at_risk'] = service.is_at_risk(job)
    return data


@router.get("")
async def list_jobs(search: Optional[str] = None, service: JobService = Depends(get_job_service)):
    """List all jobs, newest first, optionally filtered by customer."""
    jobs = service.search_jobs(search) if search else service.list_jobs()
    return [_job_out(service, j) for j in jobs]


@router.get("/stats")
async def get_stats(service: JobService = Depends(get_job_service)):
    """Dashboard headline numbers."""
    return service.dashboard_stats()


@router.get("/dispatch")
async def dispatch_board(sort: str = "none", service: JobService = Depends(get_job_service)):
    """Active jobs for the dispatch board."""
    try:
        jobs = service.dispatch_board(sort)
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return [_job_out(service, j) for j in jobs]


@router.get("/{job_id}")
async def get_job(job_id: str, service: JobService = Depends(get_job_service)):
    """Get a single job by ID."""
    try:
        return _job_out(service, service.get_job(job_id))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("")
async def create_job(
    body: JobCreate,
    service: JobService = Depends(get_job_service),
    engine: PricingEngine = Depends(get_engine),
):
    """Price the move and save the accepted tier as a new lead."""
    try:
        logistics = MoveLogistics(**body.logistics.model_dump())
        pricing = engine.calculate(logistics)
        job = service.create_job_from_quote(
            logistics=logistics,
            pricing=pricing,
            tier=body.tier,
            customer_name=body.customer_name,
            customer_phone=body.customer_phone,
            customer_email=body.customer_email,
            tip=body.tip,
        )
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail={"error": str(e), "field": e.field})
    return _job_out(service, job)


@router.put("/{job_id}/status")
async def update_status(job_id: str, body: StatusUpdate, service: JobService = Depends(get_job_service)):
    try:
        return _job_out(service, service.update_status(job_id, body.status))
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/{job_id}/crew")
async def assign_crew(job_id: str, body: CrewAssign, service: JobService = Depends(get_job_service)):
    try:
        return _job_out(service, service.assign_crew(job_id, body.crew_id, body.start_time))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{job_id}/checklist/{item}")
async def toggle_checklist(job_id: str, item: str, service: JobService = Depends(get_job_service)):
    """Flip a readiness checklist item."""
    try:
        return _job_out(service, service.toggle_checklist(job_id, item))
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
