"""
Reports - Tabular exports of jobs, receipts and payroll for download.
"""
import pandas as pd

from .crew_service import Employee, Receipt
from .job_service import Job, job_total


JOB_COLUMNS = ['Job ID', 'Customer', 'Phone', 'Status', 'Move Date', 'Tier', 'Total', 'Tip', 'Readiness']


def jobs_frame(jobs: list[Job]) -> pd.DataFrame:
    """One row per job with its selected tier total."""
    rows = [{
        'Job ID': j.id,
        'Customer': j.customer_name,
        'Phone': j.customer_phone,
        'Status': j.status,
        'Move Date': j.logistics.date,
        'Tier': j.selected_tier or 'recommended',
        'Total': job_total(j),
        'Tip': j.pricing.tip or 0,
        'Readiness': j.readiness_score,
    } for j in jobs]
    return pd.DataFrame(rows, columns=JOB_COLUMNS)


def tiers_frame(job_or_pricing) -> pd.DataFrame:
    """Side-by-side tier comparison for a job or a SmartPricing."""
    pricing = getattr(job_or_pricing, 'pricing', job_or_pricing)
    return pd.DataFrame([{
        'Tier': tier.label,
        'Price': tier.price,
        'Deposit': tier.deposit_due,
        'Card Fee': tier.processing_fee,
        'Total': tier.total_with_fees,
        'Margin %': tier.margin,
    } for tier in pricing.tiers.values()])


def receipts_frame(receipts: list[Receipt]) -> pd.DataFrame:
    columns = ['Date', 'Title', 'Category', 'Amount', 'Uploaded By']
    rows = [{
        'Date': r.date,
        'Title': r.title,
        'Category': r.category,
        'Amount': r.amount,
        'Uploaded By': r.uploaded_by,
    } for r in receipts]
    return pd.DataFrame(rows, columns=columns)


def payroll_frame(employees: list[Employee]) -> pd.DataFrame:
    """Flattened payment history across all employees."""
    columns = ['Employee', 'Date', 'Type', 'Amount', 'Note']
    rows = [{
        'Employee': e.name,
        'Date': rec.date,
        'Type': rec.type,
        'Amount': rec.amount,
        'Note': rec.note,
    } for e in employees for rec in e.payroll.payment_history]
    df = pd.DataFrame(rows, columns=columns)
    if not df.empty:
        df = df.sort_values('Date', ascending=False, ignore_index=True)
    return df


def to_csv(df: pd.DataFrame) -> str:
    return df.to_csv(index=False)
