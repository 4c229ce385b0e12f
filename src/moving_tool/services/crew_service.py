"""
Crew Service - Employees, payroll, crews, time clock and receipts.
"""
import logging
from dataclasses import dataclass, field, asdict
from datetime import date, datetime, timedelta
from typing import Optional, TYPE_CHECKING

from ..engine.errors import InvalidInputError, NotFoundError
from .job_service import new_id

if TYPE_CHECKING:
    from .state_store import AppState

logger = logging.getLogger(__name__)


USER_ROLES = ('owner', 'ops-manager', 'crew-lead', 'mover')
PAYROLL_TYPES = ('salary', 'bonus', 'reimbursement')
W9_STATUSES = ('pending', 'verified')
CREW_STATUSES = ('available', 'on-job', 'off')
RECEIPT_CATEGORIES = ('Fuel', 'Equipment', 'Maintenance', 'Office', 'Travel', 'Other')
PROBATION_DAYS = 90


@dataclass
class PayrollRecord:
    id: str
    date: str
    amount: float
    type: str  # salary / bonus / reimbursement
    note: str = ''


@dataclass
class PayrollInfo:
    routing_number: str = ''
    account_number: str = ''
    bank_name: str = ''
    tax_id: str = ''
    w9_status: str = 'pending'
    payment_history: list[PayrollRecord] = field(default_factory=list)


@dataclass
class Employee:
    id: str
    name: str
    phone: str = ''
    email: str = ''
    address: str = ''
    role: str = 'mover'
    payroll: PayrollInfo = field(default_factory=PayrollInfo)
    status: str = 'active'
    hire_date: str = ''

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> 'Employee':
        data = dict(data)
        payroll = dict(data.get('payroll') or {})
        payroll['payment_history'] = [PayrollRecord(**r) for r in payroll.get('payment_history', [])]
        data['payroll'] = PayrollInfo(**payroll)
        return cls(**data)


@dataclass
class Crew:
    id: str
    name: str
    employee_ids: list[str] = field(default_factory=list)
    status: str = 'available'

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> 'Crew':
        return cls(**data)


@dataclass
class TimeEntry:
    id: str
    employee_id: str
    clock_in: str
    clock_out: Optional[str] = None
    job_id: Optional[str] = None
    mileage: Optional[float] = None

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> 'TimeEntry':
        return cls(**data)


@dataclass
class Receipt:
    id: str
    title: str
    amount: float
    category: str
    date: str
    image_url: str = ''
    uploaded_by: str = 'System'

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> 'Receipt':
        return cls(**data)


def seed_employees() -> list[Employee]:
    """Starter roster used when no saved employees exist."""
    return [
        Employee(
            id='e1',
            name='Mike Johnson',
            role='crew-lead',
            phone='555-123-4567',
            email='mike@elitemovers.com',
            address='123 Pine St, Minneapolis, MN',
            hire_date='2024-01-15',
            payroll=PayrollInfo(
                routing_number='123456789',
                account_number='987654321',
                bank_name='First National',
                tax_id='SSN-XX-1234',
                w9_status='verified',
                payment_history=[
                    PayrollRecord(id='p1', date='2024-02-01', amount=2450, type='salary', note='Feb Salary'),
                    PayrollRecord(id='p2', date='2024-03-01', amount=2450, type='salary', note='Mar Salary'),
                ],
            ),
        ),
        Employee(
            id='e2',
            name='Steve Miller',
            role='mover',
            phone='555-987-6543',
            email='steve@elitemovers.com',
            address='456 Oak Ave, St. Paul, MN',
            hire_date='2024-03-10',
            payroll=PayrollInfo(
                routing_number='987654321',
                account_number='123456789',
                bank_name='Chase',
                tax_id='SSN-XX-5678',
            ),
        ),
    ]


def seed_crews() -> list[Crew]:
    return [
        Crew(id='c1', name='Alpha Crew', employee_ids=['e1']),
        Crew(id='c2', name='Bravo Squad', employee_ids=['e2']),
    ]


def probation_end_date(employee: Employee) -> Optional[str]:
    """Hire date + 90 days as ISO date, or None without a hire date."""
    if not employee.hire_date:
        return None
    hired = date.fromisoformat(employee.hire_date)
    return (hired + timedelta(days=PROBATION_DAYS)).isoformat()


def is_probation_active(employee: Employee, today: Optional[date] = None) -> bool:
    end = probation_end_date(employee)
    if end is None:
        return False
    return (today or date.today()) < date.fromisoformat(end)


def hours_worked(entry: TimeEntry) -> Optional[float]:
    """Hours between clock in and clock out, None while still clocked in."""
    if not entry.clock_out:
        return None
    delta = datetime.fromisoformat(entry.clock_out) - datetime.fromisoformat(entry.clock_in)
    return round(delta.total_seconds() / 3600, 2)


class CrewService:
    """Service for roster, crews, time clock and receipts held in application state."""

    def __init__(self, state: 'AppState'):
        self.state = state

    # Employees

    def get_employee(self, employee_id: str) -> Employee:
        for employee in self.state.employees:
            if employee.id == employee_id:
                return employee
        raise NotFoundError(f"Employee with ID '{employee_id}' not found")

    def add_employee(self, employee: Employee) -> Employee:
        if not employee.name:
            raise InvalidInputError("Name is required", field='name')
        if employee.role not in USER_ROLES:
            raise InvalidInputError(f"Role must be one of {USER_ROLES}, got '{employee.role}'", field='role')
        if not employee.id:
            employee.id = new_id()
        if any(e.id == employee.id for e in self.state.employees):
            raise InvalidInputError(f"Employee with ID '{employee.id}' already exists", field='id')
        self.state.employees.append(employee)
        return employee

    def update_employee(self, employee_id: str, updates: dict) -> Employee:
        employee = self.get_employee(employee_id)
        if 'role' in updates and updates['role'] not in USER_ROLES:
            raise InvalidInputError(f"Role must be one of {USER_ROLES}, got '{updates['role']}'", field='role')
        for key, value in updates.items():
            if hasattr(employee, key) and key not in ('id', 'payroll'):
                setattr(employee, key, value)
        return employee

    def deactivate_employee(self, employee_id: str) -> Employee:
        employee = self.get_employee(employee_id)
        employee.status = 'inactive'
        for crew in self.state.crews:
            if employee_id in crew.employee_ids:
                crew.employee_ids.remove(employee_id)
        return employee

    def add_payroll_record(
        self,
        employee_id: str,
        amount: float,
        record_type: str,
        note: str = '',
        on: Optional[date] = None,
    ) -> PayrollRecord:
        if amount <= 0:
            raise InvalidInputError(f"Payroll amount must be positive, got {amount}", field='amount')
        if record_type not in PAYROLL_TYPES:
            raise InvalidInputError(f"Payroll type must be one of {PAYROLL_TYPES}, got '{record_type}'", field='type')
        employee = self.get_employee(employee_id)
        record = PayrollRecord(
            id=new_id(),
            date=(on or date.today()).isoformat(),
            amount=amount,
            type=record_type,
            note=note,
        )
        employee.payroll.payment_history.append(record)
        return record

    # Crews

    def get_crew(self, crew_id: str) -> Crew:
        for crew in self.state.crews:
            if crew.id == crew_id:
                return crew
        raise NotFoundError(f"Crew with ID '{crew_id}' not found")

    def create_crew(self, name: str = 'New Crew') -> Crew:
        crew = Crew(id=new_id(), name=name or 'New Crew')
        self.state.crews.append(crew)
        return crew

    def add_member(self, crew_id: str, employee_id: str) -> Crew:
        crew = self.get_crew(crew_id)
        self.get_employee(employee_id)
        if employee_id not in crew.employee_ids:
            crew.employee_ids.append(employee_id)
        return crew

    def remove_member(self, crew_id: str, employee_id: str) -> Crew:
        crew = self.get_crew(crew_id)
        if employee_id in crew.employee_ids:
            crew.employee_ids.remove(employee_id)
        return crew

    def set_crew_status(self, crew_id: str, status: str) -> Crew:
        if status not in CREW_STATUSES:
            raise InvalidInputError(f"Crew status must be one of {CREW_STATUSES}, got '{status}'", field='status')
        crew = self.get_crew(crew_id)
        crew.status = status
        return crew

    # Time clock

    def active_entry(self, employee_id: str) -> Optional[TimeEntry]:
        for entry in self.state.time_entries:
            if entry.employee_id == employee_id and not entry.clock_out:
                return entry
        return None

    def clock_toggle(
        self,
        employee_id: str,
        mileage: Optional[float] = None,
        job_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> TimeEntry:
        """Clock out of the open entry, or clock in if there is none."""
        if mileage is not None and mileage < 0:
            raise InvalidInputError(f"Mileage cannot be negative, got {mileage}", field='mileage')
        self.get_employee(employee_id)
        stamp = (now or datetime.now()).isoformat()

        entry = self.active_entry(employee_id)
        if entry:
            entry.clock_out = stamp
            if mileage is not None:
                entry.mileage = mileage
            logger.info("Employee %s clocked out (%sh)", employee_id, hours_worked(entry))
            return entry

        entry = TimeEntry(id=new_id(), employee_id=employee_id, clock_in=stamp, job_id=job_id)
        self.state.time_entries.insert(0, entry)
        logger.info("Employee %s clocked in", employee_id)
        return entry

    # Receipts

    def add_receipt(
        self,
        amount: float = 0,
        category: str = 'Fuel',
        title: str = 'Manual Receipt',
        image_url: str = '',
        uploaded_by: str = 'System',
        on: Optional[date] = None,
    ) -> Receipt:
        if amount < 0:
            raise InvalidInputError(f"Receipt amount cannot be negative, got {amount}", field='amount')
        if category not in RECEIPT_CATEGORIES:
            raise InvalidInputError(
                f"Receipt category must be one of {RECEIPT_CATEGORIES}, got '{category}'", field='category'
            )
        receipt = Receipt(
            id=new_id(),
            title=title or 'Manual Receipt',
            amount=amount,
            category=category,
            date=(on or date.today()).isoformat(),
            image_url=image_url,
            uploaded_by=uploaded_by or 'System',
        )
        self.state.receipts.insert(0, receipt)
        return receipt

    def receipt_totals_by_category(self) -> dict[str, float]:
        totals = {}
        for receipt in self.state.receipts:
            totals[receipt.category] = totals.get(receipt.category, 0) + receipt.amount
        return totals
