"""
Streamlit UI for the moving company dashboard.

Features:
- Tabbed interface for HQ, Quote Builder, Jobs, Dispatch and Crew
- Three-tier quote with breakdown and surcharge reasons
- Readiness checklist per job
- CSV export of jobs, receipts and payroll
"""
import base64

import streamlit as st
import pandas as pd
from datetime import date, datetime

from moving_tool.config.settings import get_settings
from moving_tool.engine import PricingEngine, MoveLogistics, InvalidInputError
from moving_tool.engine.models import WALK_DISTANCES, PACKING_TYPES, TIER_KEYS
from moving_tool.engine.rate_tables import PRICING_VERSION
from moving_tool.services.crew_service import CrewService, RECEIPT_CATEGORIES, is_probation_active, probation_end_date
from moving_tool.services.job_service import JobService, JOB_STATUSES, DISPATCH_SORTS, PHOTO_TYPES, job_total
from moving_tool.services.readiness import ReadinessChecklist
from moving_tool.services.state_store import StateStore
from moving_tool.services import reports


st.set_page_config(
    page_title="Moving Operations Dashboard",
    layout="wide",
    initial_sidebar_state="expanded"
)


@st.cache_resource
def get_settings_cached():
    """Get cached settings."""
    return get_settings()


@st.cache_resource
def get_store():
    return StateStore(get_settings_cached().data_dir)


try:
    settings = get_settings_cached()
    store = get_store()
    if 'app_state' not in st.session_state:
        st.session_state.app_state = store.load()
except Exception as e:
    st.error(f"System Error: {e}")
    st.stop()

app_state = st.session_state.app_state
engine = PricingEngine(app_state.settings)
jobs = JobService(app_state, settings.at_risk_score, settings.dashboard_at_risk_score)
crew = CrewService(app_state)

CHECKLIST_LABELS = {
    'deposit': "Deposit Secured",
    'address': "Addresses Confirmed",
    'inventory': "Inventory Verified",
    'elevator': "Elevator Reserved",
    'confirmation': "Final Confirmation",
    'agreement_signed': "Agreement Signed",
}


# ============================================================================
# SIDEBAR: Company
# ============================================================================
with st.sidebar:
    st.header("🚚 " + app_state.settings.name)
    st.caption(app_state.settings.phone)
    st.caption("Service area: " + ", ".join(app_state.settings.service_area))

    st.divider()
    if st.button("💾 Save", use_container_width=True):
        store.save(app_state)
        st.toast(f"Saved to {store.data_dir}")


st.title("Moving Operations Dashboard")
st.caption(f"Pricing {PRICING_VERSION} | {datetime.now().strftime('%Y-%m-%d')}")

tab_hq, tab_quote, tab_jobs, tab_dispatch, tab_crew = st.tabs(
    ["🏠 HQ", "⚡ Quote Builder", "📋 Jobs", "🗺️ Dispatch", "👷 Crew"]
)


# ============================================================================
# TAB 1: HQ
# ============================================================================
with tab_hq:
    stats = jobs.dashboard_stats()
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("New Leads", stats['leads_today'])
    c2.metric("Active Jobs", stats['jobs_today'])
    c3.metric("Revenue Protected", f"${stats['revenue_protected']:,.0f}")
    c4.metric("At Risk", stats['at_risk'])

    if app_state.jobs:
        st.dataframe(reports.jobs_frame(app_state.jobs), use_container_width=True, hide_index=True)


# ============================================================================
# TAB 2: QUOTE BUILDER
# ============================================================================
with tab_quote:
    col1, col2 = st.columns([1.2, 1.8], gap="large")

    with col1:
        st.subheader("Move Details")
        with st.container(border=True):
            move_date = st.date_input("Move Date", value=date.today())
            time_window = st.text_input("Time Window", value="08:00 - 10:00")
            crew_size = st.selectbox("Crew Size", [2, 3, 4], index=1)
            estimated_hours = st.number_input("Estimated Hours", min_value=0.0, value=4.0, step=0.5)
            mileage = st.number_input("Mileage", min_value=0.0, value=10.0, step=1.0)
            s1, s2 = st.columns(2)
            stairs_pickup = s1.number_input("Stairs (pickup)", min_value=0, value=0, step=1)
            stairs_dropoff = s2.number_input("Stairs (dropoff)", min_value=0, value=0, step=1)
            walk_distance = st.selectbox("Walk Distance", WALK_DISTANCES, index=1)
            packing_type = st.selectbox("Packing", PACKING_TYPES, index=0)
            heavy_items = st.number_input("Heavy Items", min_value=0, value=0, step=1)
            duration_days = st.number_input("Duration (days)", min_value=1, value=1, step=1)
            f1, f2 = st.columns(2)
            is_same_day = f1.checkbox("Same Day")
            is_weekend = f2.checkbox("Weekend")
            is_month_end = f1.checkbox("Month End")
            use_credit_card = f2.checkbox("Pay by Card")
            timeline_notes = st.text_area("Timeline Notes", height=80)

        logistics = MoveLogistics(
            date=move_date.isoformat(),
            time_window=time_window,
            crew_size=int(crew_size),
            stairs_pickup=int(stairs_pickup),
            stairs_dropoff=int(stairs_dropoff),
            walk_distance=walk_distance,
            packing_type=packing_type,
            heavy_items_count=int(heavy_items),
            mileage=float(mileage),
            is_same_day=is_same_day,
            is_weekend=is_weekend,
            is_month_end=is_month_end,
            use_credit_card=use_credit_card,
            estimated_hours=float(estimated_hours),
            duration_days=int(duration_days),
            timeline_notes=timeline_notes,
        )

    with col2:
        st.subheader("Quote")
        try:
            pricing = engine.calculate(logistics)
        except InvalidInputError as e:
            st.error(str(e))
            pricing = None

        if pricing:
            cols = st.columns(3)
            for col, (key, tier) in zip(cols, pricing.tiers.items()):
                with col.container(border=True):
                    st.markdown(f"##### {tier.label}")
                    st.metric("Price", f"${tier.price:,}")
                    st.caption(f"Deposit ${tier.deposit_due:,} | Margin {tier.margin}%")
                    if tier.processing_fee:
                        st.caption(f"Card fee ${tier.processing_fee:,} → ${tier.total_with_fees:,}")
                    st.caption(tier.description)

            b = pricing.breakdown
            st.markdown(
                f"**Breakdown:** labor ${b.labor_revenue:,.2f} ({b.estimated_hours:g}h) + "
                f"truck ${b.truck_fee:,.0f} + mileage ${b.mileage_charge:,.2f} + fuel ${b.fuel_fee:,.0f} "
                f"= ${b.base_subtotal:,.2f} × {b.complexity_multiplier:g}"
            )
            for reason in pricing.surcharge_reasons:
                st.caption(f"• {reason}")

            with st.expander("🔍 Calculation Trace"):
                st.text(pricing.get_trace_text())

            st.divider()
            with st.container(border=True):
                st.markdown("##### Save as Lead")
                cust_name = st.text_input("Customer Name")
                p1, p2 = st.columns(2)
                cust_phone = p1.text_input("Phone")
                cust_email = p2.text_input("Email")
                tip = st.number_input("Tip", min_value=0.0, value=0.0, step=5.0)
                tier_key = st.radio(
                    "Tier", TIER_KEYS, index=1, horizontal=True,
                    format_func=lambda k: pricing.tier(k).label,
                )
                if st.button("➕ Save Lead", type="primary"):
                    job = jobs.create_job_from_quote(
                        logistics, pricing, tier_key,
                        customer_name=cust_name, customer_phone=cust_phone,
                        customer_email=cust_email, tip=tip,
                    )
                    st.success(f"Saved job {job.id} (${job_total(job):,.0f})")


# ============================================================================
# TAB 3: JOBS
# ============================================================================
with tab_jobs:
    search = st.text_input("Search Jobs", placeholder="Name, phone or email...", label_visibility="collapsed")
    found = jobs.search_jobs(search) if search else jobs.list_jobs()

    if not found:
        st.info("No jobs yet. Save a quote from the Quote Builder.")

    for job in found:
        with st.expander(f"{job.customer_name} | {job.status} | ${job_total(job):,.0f} | {job.readiness_score}%"):
            c1, c2 = st.columns([1, 1])
            with c1:
                new_status = st.selectbox(
                    "Status", JOB_STATUSES, index=JOB_STATUSES.index(job.status), key=f"status_{job.id}"
                )
                if new_status != job.status:
                    jobs.update_status(job.id, new_status)
                    st.rerun()
                st.dataframe(reports.tiers_frame(job), use_container_width=True, hide_index=True)

                crew_ids = [None] + [c.id for c in app_state.crews]
                crew_id = st.selectbox(
                    "Crew", crew_ids, index=crew_ids.index(job.crew_id) if job.crew_id in crew_ids else 0,
                    format_func=lambda i: crew.get_crew(i).name if i else "Unassigned", key=f"crew_{job.id}",
                )
                if crew_id != job.crew_id:
                    jobs.assign_crew(job.id, crew_id)
                    st.rerun()

                notes = st.text_area("Notes", value=job.notes, key=f"notes_{job.id}")
                if notes != job.notes:
                    jobs.update_notes(job.id, notes)

                photo_type = st.selectbox("Photo", PHOTO_TYPES, key=f"ptype_{job.id}")
                upload = st.file_uploader("Upload", type=["png", "jpg", "jpeg"], key=f"photo_{job.id}")
                if upload is not None and st.button("📷 Attach", key=f"attach_{job.id}"):
                    encoded = base64.b64encode(upload.getvalue()).decode('ascii')
                    jobs.add_photo(job.id, f"data:{upload.type};base64,{encoded}", photo_type)
                    st.rerun()
                st.caption(f"{len(job.photos)} photo(s)")
            with c2:
                st.markdown(f"**Readiness: {job.readiness_score}%**")
                for item in ReadinessChecklist.items():
                    checked = st.checkbox(
                        CHECKLIST_LABELS[item], value=getattr(job.checklist, item), key=f"chk_{job.id}_{item}"
                    )
                    if checked != getattr(job.checklist, item):
                        jobs.toggle_checklist(job.id, item)
                        st.rerun()

    if app_state.jobs:
        st.download_button(
            "📥 Jobs CSV",
            data=reports.to_csv(reports.jobs_frame(app_state.jobs)),
            file_name="jobs.csv",
            mime="text/csv",
        )


# ============================================================================
# TAB 4: DISPATCH
# ============================================================================
with tab_dispatch:
    sort = st.selectbox("Sort", DISPATCH_SORTS, label_visibility="collapsed")
    board = jobs.dispatch_board(sort)
    if board:
        st.dataframe(pd.DataFrame([{
            'Customer': j.customer_name,
            'Status': j.status,
            'Date': j.logistics.date,
            'Window': j.logistics.time_window,
            'Crew': j.crew_id or '',
            'Readiness': f"{j.readiness_score}%",
            'At Risk': "⚠️" if jobs.is_at_risk(j) else "",
        } for j in board]), use_container_width=True, hide_index=True)
    else:
        st.info("Nothing on the board.")


# ============================================================================
# TAB 5: CREW
# ============================================================================
with tab_crew:
    c1, c2 = st.columns(2)
    with c1:
        st.subheader("Roster")
        st.dataframe(pd.DataFrame([{
            'Name': e.name,
            'Role': e.role,
            'Status': e.status,
            'Hired': e.hire_date,
            'Probation Ends': probation_end_date(e) or 'N/A',
            'On Probation': is_probation_active(e),
        } for e in app_state.employees]), use_container_width=True, hide_index=True)

        employee_id = st.selectbox(
            "Time Clock", [e.id for e in app_state.employees],
            format_func=lambda i: crew.get_employee(i).name,
        )
        open_entry = crew.active_entry(employee_id) if employee_id else None
        clock_miles = st.number_input("Mileage", min_value=0.0, value=0.0, key="clock_miles")
        if st.button("⏱️ Clock Out" if open_entry else "⏱️ Clock In"):
            crew.clock_toggle(employee_id, mileage=clock_miles if open_entry else None)
            st.rerun()

        payroll = reports.payroll_frame(app_state.employees)
        if not payroll.empty:
            st.download_button("📥 Payroll CSV", data=reports.to_csv(payroll), file_name="payroll.csv", mime="text/csv")

    with c2:
        st.subheader("Receipts")
        r1, r2 = st.columns(2)
        r_title = r1.text_input("Title", value="Manual Receipt")
        r_amount = r2.number_input("Amount", min_value=0.0, value=0.0, step=1.0)
        r_category = st.selectbox("Category", RECEIPT_CATEGORIES)
        if st.button("➕ Add Receipt"):
            crew.add_receipt(amount=r_amount, category=r_category, title=r_title)
            st.rerun()

        receipts = reports.receipts_frame(app_state.receipts)
        st.dataframe(receipts, use_container_width=True, hide_index=True)
        totals = crew.receipt_totals_by_category()
        if totals:
            st.bar_chart(pd.Series(totals, name="Amount"))
