"""
Job Service - Lead and job records built from accepted quotes.

Handles freezing a quote onto a job, pipeline status changes, the
readiness checklist, the dispatch board and dashboard stats.
"""
import copy
import logging
import uuid
from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Optional, TYPE_CHECKING

from ..engine.errors import InvalidInputError, NotFoundError
from ..engine.models import MoveLogistics, SmartPricing, TIER_KEYS
from .readiness import ReadinessChecklist, readiness_score, is_at_risk

if TYPE_CHECKING:
    from .state_store import AppState

logger = logging.getLogger(__name__)


JOB_STATUSES = ('new', 'contacted', 'quoted', 'deposit-paid', 'booked', 'in-progress', 'completed', 'lost')
SERVICE_TYPES = ('Local', 'Long Distance', 'Labor Only', 'Packing', 'Junk')
LEAD_SOURCES = ('GBP', 'Ads', 'Referral', 'Web')
PHOTO_TYPES = ('before', 'after', 'damage')
DISPATCH_STATUSES = ('booked', 'in-progress', 'quoted', 'new')
DISPATCH_SORTS = ('none', 'score-desc', 'score-asc')


def new_id() -> str:
    return uuid.uuid4().hex[:9]


@dataclass
class JobPhoto:
    """A before/after/damage photo attached to a job."""
    url: str
    type: str
    timestamp: str


@dataclass
class Job:
    """A lead or booked move with its frozen pricing."""
    id: str
    customer_name: str
    customer_phone: str
    customer_email: str
    logistics: MoveLogistics
    pricing: SmartPricing
    status: str = 'new'
    service_type: str = 'Local'
    selected_tier: Optional[str] = None
    readiness_score: int = 0
    checklist: ReadinessChecklist = field(default_factory=ReadinessChecklist)
    crew_id: Optional[str] = None
    start_time: Optional[str] = None
    risk_flags: list[str] = field(default_factory=list)
    lead_source: str = 'Web'
    notes: str = ''
    photos: list[JobPhoto] = field(default_factory=list)
    agreement_url: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> 'Job':
        data = dict(data)
        data['logistics'] = MoveLogistics.from_dict(data.get('logistics', {}))
        data['pricing'] = SmartPricing.from_dict(data['pricing'])
        data['checklist'] = ReadinessChecklist.from_dict(data.get('checklist', {}))
        data['photos'] = [JobPhoto(**p) for p in data.get('photos', [])]
        return cls(**data)


def job_total(job: Job) -> float:
    """Selected tier's fee-inclusive total plus any tip."""
    tier = job.pricing.tier(job.selected_tier or 'recommended')
    return tier.total_with_fees + (job.pricing.tip or 0)


class JobService:
    """Service for managing jobs held in application state."""

    def __init__(self, state: 'AppState', at_risk_score: int = 70, dashboard_at_risk_score: int = 50):
        self.state = state
        self.at_risk_score = at_risk_score
        self.dashboard_at_risk_score = dashboard_at_risk_score

    def list_jobs(self) -> list[Job]:
        return list(self.state.jobs)

    def get_job(self, job_id: str) -> Job:
        """Get a single job by ID."""
        for job in self.state.jobs:
            if job.id == job_id:
                return job
        raise NotFoundError(f"Job with ID '{job_id}' not found")

    def create_job_from_quote(
        self,
        logistics: MoveLogistics,
        pricing: SmartPricing,
        tier: str,
        customer_name: str = '',
        customer_phone: str = '',
        customer_email: str = '',
        tip: float = 0,
    ) -> Job:
        """
        Save an accepted quote as a new lead.

        The pricing is copied, so later changes to the quote shown in the
        builder do not reach the job.
        """
        if tier not in TIER_KEYS:
            raise InvalidInputError(f"Unknown tier '{tier}'. Expected one of {TIER_KEYS}", field='tier')
        if tip is None:
            tip = 0
        if tip < 0:
            raise InvalidInputError(f"Tip cannot be negative, got {tip}", field='tip')

        frozen = copy.deepcopy(pricing)
        frozen.tip = tip

        job = Job(
            id=new_id(),
            customer_name=customer_name or 'Anonymous',
            customer_phone=customer_phone or 'N/A',
            customer_email=customer_email or 'N/A',
            logistics=copy.deepcopy(logistics),
            pricing=frozen,
            selected_tier=tier,
        )
        self.state.jobs.insert(0, job)
        logger.info("Created job %s for %s (%s tier, $%s)", job.id, job.customer_name, tier, job_total(job))
        return job

    def update_status(self, job_id: str, status: str) -> Job:
        if status not in JOB_STATUSES:
            raise InvalidInputError(f"Unknown status '{status}'. Expected one of {JOB_STATUSES}", field='status')
        job = self.get_job(job_id)
        job.status = status
        return job

    def assign_crew(self, job_id: str, crew_id: Optional[str], start_time: Optional[str] = None) -> Job:
        job = self.get_job(job_id)
        if crew_id is not None and not any(c.id == crew_id for c in self.state.crews):
            raise NotFoundError(f"Crew with ID '{crew_id}' not found")
        job.crew_id = crew_id
        if start_time is not None:
            job.start_time = start_time
        return job

    def update_notes(self, job_id: str, notes: str) -> Job:
        job = self.get_job(job_id)
        job.notes = notes
        return job

    def add_photo(self, job_id: str, url: str, photo_type: str, now: Optional[datetime] = None) -> JobPhoto:
        if photo_type not in PHOTO_TYPES:
            raise InvalidInputError(f"Photo type must be one of {PHOTO_TYPES}, got '{photo_type}'", field='type')
        job = self.get_job(job_id)
        photo = JobPhoto(url=url, type=photo_type, timestamp=(now or datetime.now()).isoformat())
        job.photos.append(photo)
        return photo

    def toggle_checklist(self, job_id: str, item: str) -> Job:
        """Flip one checklist item and recompute the readiness score."""
        job = self.get_job(job_id)
        job.checklist.toggle(item)
        job.readiness_score = readiness_score(job.checklist)
        return job

    def search_jobs(self, query: str) -> list[Job]:
        """Match customer name or email (case-insensitive) or phone."""
        q = (query or '').lower()
        return [
            j for j in self.state.jobs
            if q in j.customer_name.lower()
            or q in j.customer_phone
            or q in j.customer_email.lower()
        ]

    def dispatch_board(self, sort: str = 'none') -> list[Job]:
        """Active jobs for the dispatch board, optionally sorted by readiness."""
        if sort not in DISPATCH_SORTS:
            raise InvalidInputError(f"Sort must be one of {DISPATCH_SORTS}, got '{sort}'", field='sort')
        active = [j for j in self.state.jobs if j.status in DISPATCH_STATUSES]
        if sort == 'score-desc':
            return sorted(active, key=lambda j: j.readiness_score, reverse=True)
        if sort == 'score-asc':
            return sorted(active, key=lambda j: j.readiness_score)
        return active

    def is_at_risk(self, job: Job) -> bool:
        return is_at_risk(job.readiness_score, self.at_risk_score)

    def dashboard_stats(self) -> dict:
        """Headline numbers for the HQ dashboard."""
        jobs = self.state.jobs
        revenue = sum(job_total(j) for j in jobs if j.selected_tier)
        return {
            'leads_today': sum(1 for j in jobs if j.status == 'new'),
            'jobs_today': sum(1 for j in jobs if j.status in ('booked', 'in-progress')),
            'revenue_protected': revenue,
            'at_risk': sum(
                1 for j in jobs
                if j.status == 'booked' and is_at_risk(j.readiness_score, self.dashboard_at_risk_score)
            ),
        }
