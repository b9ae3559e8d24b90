"""Tab 3: Admin: solo approvals, removals, reset and the audit trail."""

import streamlit as st

from data.session_store import get_service, get_admin_name, set_admin_name
from engine.approval import APPROVE, REJECT
from engine.occupancy import get_occupancy
from components.tables import render_claims_table, render_audit_table
from components.metrics_cards import render_alert_card


def _render_pending(service, admin: str):
    st.subheader("Pending Solo Requests")
    queue = service.workflow.pending_queue()
    if not queue:
        st.success("No requests awaiting review.")
        return

    for record in queue:
        col1, col2, col3 = st.columns([4, 1, 1])
        with col1:
            st.markdown(
                f"**{record.record_id}**: {record.spot_id} ({record.target_label}) · "
                f"{record.requester.name} ({record.requester.person_id}, {record.requester.contact})"
            )
        with col2:
            if st.button("Approve", key=f"approve_{record.record_id}", disabled=not admin):
                _show_decision(service.workflow.decide(record.record_id, APPROVE, admin))
        with col3:
            if st.button("Reject", key=f"reject_{record.record_id}", disabled=not admin):
                _show_decision(service.workflow.decide(record.record_id, REJECT, admin))


def _show_decision(result):
    if result.ok:
        st.toast(f"Claim {result.record_id} updated")
        st.rerun()
    else:
        st.error(f"{result.tag}: {result.message}")


def render(sidebar_state):
    """Render the Admin tab."""
    st.header("Admin")
    service = get_service()

    admin = st.text_input("Acting admin", value=get_admin_name(), key="admin_name_input")
    if admin != get_admin_name():
        set_admin_name(admin)
    if not admin:
        st.info("Enter your name to approve, reject or remove claims.")

    occupancy = get_occupancy(service.catalog, service.claim_log)
    for issue in occupancy.issues:
        render_alert_card(f"Consistency violation: {issue.describe()}", "error")

    _render_pending(service, admin)

    st.divider()
    st.subheader("All Claims")
    records = service.claim_log.all_records()
    render_claims_table(records)

    if records:
        col1, col2 = st.columns([3, 1])
        with col1:
            record_id = st.selectbox("Claim to remove", [r.record_id for r in records], key="remove_id")
        with col2:
            st.write("")
            if st.button("Remove claim", disabled=not admin, key="btn_remove"):
                result = service.workflow.remove_claim(record_id, admin)
                if result.ok:
                    st.rerun()
                st.error(f"{result.tag}: {result.message}")

    st.divider()
    st.subheader("Reset")
    confirm = st.checkbox("I understand this releases every spot in every lot.", key="confirm_reset")
    if st.button("Reset all claims", type="primary", disabled=not (admin and confirm), key="btn_reset"):
        count = service.workflow.reset_all(admin)
        st.success(f"Cleared {count} claims.")

    st.divider()
    st.subheader("Audit Trail")
    render_audit_table(service.claim_log.audit_log())
