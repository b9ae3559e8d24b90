"""Claim record tables."""

import streamlit as st
import pandas as pd
from typing import List

from models.audit import AuditEntry
from models.claim import ClaimRecord


def claims_df(records: List[ClaimRecord]) -> pd.DataFrame:
    rows = []
    for r in records:
        partner = r.partner
        rows.append({
            "Claim": r.record_id,
            "Spot": r.spot_id,
            "Target": r.target_label,
            "Requester": r.requester.name,
            "Requester ID": r.requester.person_id,
            "Contact": r.requester.contact,
            "Partner": partner.name if partner else "",
            "Status": r.status.value,
            "Submitted": r.created_at.strftime("%Y-%m-%d %H:%M") if r.created_at else "",
            "Decided By": r.decided_by or "",
        })
    return pd.DataFrame(rows)


def render_claims_table(records: List[ClaimRecord], status_column: str = "Status"):
    """Render claim records with colour-coded status."""
    def color_status(val):
        if val == "pending":
            return "background-color: #fff3cd; color: #856404; font-weight: bold"
        elif val == "approved":
            return "background-color: #d4edda; color: #155724; font-weight: bold"
        elif val == "rejected":
            return "background-color: #ffcccc; color: #cc0000"
        return ""

    df = claims_df(records)
    if df.empty:
        st.info("No claims yet.")
        return
    st.dataframe(df.style.map(color_status, subset=[status_column]), use_container_width=True)


def render_audit_table(entries: List[AuditEntry]):
    if not entries:
        st.caption("Audit trail is empty.")
        return
    df = pd.DataFrame([{
        "Time": e.timestamp.strftime("%Y-%m-%d %H:%M:%S"),
        "Action": e.action,
        "Claim": e.record_id or "—",
        "From": e.old_status,
        "To": e.new_status,
        "By": e.actor,
        "Detail": e.detail,
    } for e in reversed(entries)])
    st.dataframe(df, use_container_width=True, height=300)
