import os
import sys

import pytest

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from moving_tool.engine import PricingEngine, MoveLogistics, InvalidInputError, NotFoundError
from moving_tool.services.job_service import JobService, job_total
from moving_tool.services.state_store import AppState
from moving_tool.services import reports


@pytest.fixture(scope="function")
def state():
    return AppState()


@pytest.fixture(scope="function")
def service(state):
    return JobService(state)


@pytest.fixture(scope="module")
def quote():
    """Reference quote: minimal 1091 / recommended 1222 / win 1161."""
    logistics = MoveLogistics()
    return logistics, PricingEngine().calculate(logistics)


def test_create_job_from_quote(service, quote):
    logistics, pricing = quote
    job = service.create_job_from_quote(logistics, pricing, 'minimal', customer_name='Dana', tip=50)

    assert job.status == 'new'
    assert job.service_type == 'Local'
    assert job.lead_source == 'Web'
    assert job.selected_tier == 'minimal'
    assert job.readiness_score == 0
    assert job.pricing.tip == 50
    assert job_total(job) == 1091 + 50
    assert job.customer_phone == 'N/A'
    assert service.list_jobs() == [job]


def test_customer_defaults(service, quote):
    job = service.create_job_from_quote(*quote, 'recommended')
    assert job.customer_name == 'Anonymous'
    assert job.customer_email == 'N/A'


def test_pricing_is_frozen_copy(service, quote):
    logistics, pricing = quote
    job = service.create_job_from_quote(logistics, pricing, 'recommended', tip=20)

    assert pricing.tip is None, "Source quote must not receive the tip"
    assert job.pricing is not pricing
    assert job.pricing.recommended == pricing.recommended


def test_newest_job_first(service, quote):
    first = service.create_job_from_quote(*quote, 'minimal', customer_name='First')
    second = service.create_job_from_quote(*quote, 'minimal', customer_name='Second')
    assert [j.id for j in service.list_jobs()] == [second.id, first.id]


@pytest.mark.parametrize("tier,tip", [('premium', 0), ('minimal', -5)])
def test_create_job_rejects_bad_input(service, quote, tier, tip):
    logistics, pricing = quote
    with pytest.raises(InvalidInputError):
        service.create_job_from_quote(logistics, pricing, tier, tip=tip)
    assert service.list_jobs() == []


def test_get_unknown_job(service):
    with pytest.raises(NotFoundError):
        service.get_job('missing')


def test_status_updates(service, quote):
    job = service.create_job_from_quote(*quote, 'minimal')
    service.update_status(job.id, 'booked')
    assert service.get_job(job.id).status == 'booked'

    with pytest.raises(InvalidInputError):
        service.update_status(job.id, 'cancelled')


def test_toggle_checklist_updates_score(service, quote):
    job = service.create_job_from_quote(*quote, 'minimal')
    for item in ('deposit', 'address', 'agreement_signed'):
        service.toggle_checklist(job.id, item)
    assert job.readiness_score == 50

    service.toggle_checklist(job.id, 'deposit')
    assert job.readiness_score == 33


def test_search_jobs(service, quote):
    service.create_job_from_quote(*quote, 'minimal', customer_name='Dana Scully', customer_phone='555-1234')
    service.create_job_from_quote(*quote, 'minimal', customer_name='Fox', customer_email='FOX@x-files.gov')

    assert [j.customer_name for j in service.search_jobs('dana')] == ['Dana Scully']
    assert [j.customer_name for j in service.search_jobs('1234')] == ['Dana Scully']
    assert [j.customer_name for j in service.search_jobs('fox@')] == ['Fox']


def test_dispatch_board(service, quote):
    a = service.create_job_from_quote(*quote, 'minimal', customer_name='A')
    b = service.create_job_from_quote(*quote, 'minimal', customer_name='B')
    c = service.create_job_from_quote(*quote, 'minimal', customer_name='C')
    service.update_status(c.id, 'completed')
    service.toggle_checklist(a.id, 'deposit')

    assert {j.id for j in service.dispatch_board()} == {a.id, b.id}
    assert [j.id for j in service.dispatch_board('score-desc')] == [a.id, b.id]
    assert [j.id for j in service.dispatch_board('score-asc')] == [b.id, a.id]
    with pytest.raises(InvalidInputError):
        service.dispatch_board('alphabetical')


def test_assign_crew(service, quote):
    job = service.create_job_from_quote(*quote, 'minimal')
    service.assign_crew(job.id, 'c1', start_time='08:00')
    assert job.crew_id == 'c1'
    assert job.start_time == '08:00'

    with pytest.raises(NotFoundError):
        service.assign_crew(job.id, 'c99')


def test_add_photo(service, quote):
    job = service.create_job_from_quote(*quote, 'minimal')
    photo = service.add_photo(job.id, 'data:image/png;base64,AAAA', 'damage')
    assert job.photos == [photo]
    with pytest.raises(InvalidInputError):
        service.add_photo(job.id, 'x', 'selfie')


def test_dashboard_stats(service, quote):
    booked = service.create_job_from_quote(*quote, 'minimal', tip=10)
    service.create_job_from_quote(*quote, 'recommended')
    service.update_status(booked.id, 'booked')

    stats = service.dashboard_stats()
    assert stats['leads_today'] == 1
    assert stats['jobs_today'] == 1
    assert stats['revenue_protected'] == 1091 + 10 + 1222
    assert stats['at_risk'] == 1

    for item in ('deposit', 'address', 'inventory'):
        service.toggle_checklist(booked.id, item)
    assert service.dashboard_stats()['at_risk'] == 0


def test_jobs_report(service, quote):
    service.create_job_from_quote(*quote, 'win_the_job', customer_name='Dana', tip=15)
    df = reports.jobs_frame(service.list_jobs())
    assert list(df.columns) == reports.JOB_COLUMNS
    assert df.iloc[0]['Total'] == 1161 + 15
    assert df.iloc[0]['Tier'] == 'win_the_job'
