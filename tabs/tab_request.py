"""Tab 2: Request: submit a claim for the selected spot."""

import streamlit as st

from config.defaults import REQUESTER_ID_LENGTH, CONTACT_DOMAIN_SUFFIX
from data.session_store import (
    get_service, get_reconciler, get_rule_config, pop_notices,
)
from models.claim import ClaimInput


def _render_confirmation(result, selection):
    target = selection.half or "Solo"
    if result.status == "pending":
        st.success(
            f"Request {result.record_id} for {selection.lot_id}-{selection.spot_number} "
            f"({target}) submitted. A solo spot needs admin approval; it stays pending until reviewed."
        )
    else:
        st.success(
            f"Claim {result.record_id} confirmed: {selection.lot_id}-{selection.spot_number} ({target})."
        )


def render(sidebar_state):
    """Render the Request tab."""
    st.header("Request a Spot")
    service = get_service()
    reconciler = get_reconciler()
    cfg = get_rule_config()

    for notice in pop_notices():
        st.error(notice)

    # Re-check before showing the form so a stale selection is caught early
    update = reconciler.poll()
    if update.invalidated:
        st.error(update.invalidated.message)

    selection = reconciler.selection
    if selection is None:
        st.info("Pick a spot on the Parking Lot tab first.")
        return

    target = selection.half or "Solo (whole spot)"
    st.markdown(f"**Spot:** {selection.lot_id}-{selection.spot_number} &nbsp; **Half:** {target}")

    id_len = cfg.get("requester_id_length", REQUESTER_ID_LENGTH)
    suffix = cfg.get("contact_domain_suffix", CONTACT_DOMAIN_SUFFIX)

    with st.form("claim_form"):
        name = st.text_input("Your name")
        person_id = st.text_input(f"Your ID ({id_len} digits)", max_chars=id_len)
        contact = st.text_input(f"Email (must end with {suffix})")
        partner_name = partner_id = None
        if not selection.is_solo:
            st.caption("Shared spots are split with a partner who takes the other half.")
            partner_name = st.text_input("Partner name")
            partner_id = st.text_input(f"Partner ID ({id_len} digits)", max_chars=id_len)
        submitted = st.form_submit_button("Submit", type="primary")

    if not submitted:
        return

    claim = ClaimInput(
        requester_name=name,
        requester_id=person_id,
        contact=contact,
        lot_id=selection.lot_id,
        spot_number=selection.spot_number,
        half=selection.half,
        is_solo=selection.is_solo,
        partner_name=partner_name,
        partner_id=partner_id,
    )
    result = service.engine.submit(claim)

    if result.ok:
        reconciler.clear_selection()
        _render_confirmation(result, selection)
    elif result.retryable:
        reconciler.clear_selection()
        st.error(f"{result.message} Someone else got there first; please choose again.")
    elif result.fields:
        st.error(result.message)
        st.caption(f"Check: {', '.join(result.fields)}")
    else:
        st.error(result.message)
