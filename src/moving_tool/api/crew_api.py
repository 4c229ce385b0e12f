"""
Crew API - FastAPI router for roster, crews, time clock and receipts.
"""
from fastapi import APIRouter, Depends, HTTPException
from fastapi.encoders import jsonable_encoder

from ..engine import InvalidInputError, NotFoundError
from ..services.crew_service import CrewService, Employee, probation_end_date
from .schemas import EmployeeCreate, CrewCreate, ReceiptCreate, ClockRequest
from .state import get_crew_service

router = APIRouter(prefix="/api/crew", tags=["crew"])


@router.get("/employees")
async def list_employees(service: CrewService = Depends(get_crew_service)):
    return [
        {**jsonable_encoder(e), "probation_end": probation_end_date(e)}
        for e in service.state.employees
    ]


@router.post("/employees")
async def create_employee(body: EmployeeCreate, service: CrewService = Depends(get_crew_service)):
    try:
        employee = service.add_employee(Employee(id='', **body.model_dump()))
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return jsonable_encoder(employee)


@router.get("/crews")
async def list_crews(service: CrewService = Depends(get_crew_service)):
    return jsonable_encoder(service.state.crews)


@router.post("/crews")
async def create_crew(body: CrewCreate, service: CrewService = Depends(get_crew_service)):
    return jsonable_encoder(service.create_crew(body.name))


@router.post("/clock/{employee_id}")
async def clock_toggle(employee_id: str, body: ClockRequest, service: CrewService = Depends(get_crew_service)):
    """Clock in, or clock out of the open time entry."""
    try:
        entry = service.clock_toggle(employee_id, mileage=body.mileage, job_id=body.job_id)
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return jsonable_encoder(entry)


@router.get("/receipts")
async def list_receipts(service: CrewService = Depends(get_crew_service)):
    return {
        "receipts": jsonable_encoder(service.state.receipts),
        "totals": service.receipt_totals_by_category(),
    }


@router.post("/receipts")
async def create_receipt(body: ReceiptCreate, service: CrewService = Depends(get_crew_service)):
    try:
        receipt = service.add_receipt(**body.model_dump())
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return jsonable_encoder(receipt)
