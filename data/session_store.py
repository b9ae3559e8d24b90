"""Typed wrapper around st.session_state, plus the process-wide claim service."""

import logging
from dataclasses import dataclass
from typing import Optional

import streamlit as st

from config.defaults import (
    CATALOG_PATH, CLAIM_LOG_PATH, POLL_INTERVAL_SECONDS,
    REQUESTER_ID_LENGTH, CONTACT_DOMAIN_SUFFIX,
    SOLO_REQUIRES_APPROVAL, SHARED_REQUIRES_APPROVAL,
)
from data.catalog_loader import load_catalog, load_catalog_json
from data.claim_log import ClaimLog
from data.sample_data import generate_catalog_document
from engine.allocation_engine import AllocationEngine
from engine.approval import ApprovalWorkflow
from engine.sync import SyncReconciler
from models.catalog import Catalog

logger = logging.getLogger(__name__)


@dataclass
class ClaimService:
    """One claim log per process, shared by every browser session."""
    catalog: Catalog
    claim_log: ClaimLog
    engine: AllocationEngine
    workflow: ApprovalWorkflow


def build_service(catalog: Catalog, claim_log_path: Optional[str] = None,
                  rule_config: Optional[dict] = None) -> ClaimService:
    claim_log = ClaimLog(path=claim_log_path)
    return ClaimService(
        catalog=catalog,
        claim_log=claim_log,
        engine=AllocationEngine(catalog, claim_log, rule_config),
        workflow=ApprovalWorkflow(claim_log),
    )


def default_rule_config() -> dict:
    return {
        "requester_id_length": REQUESTER_ID_LENGTH,
        "contact_domain_suffix": CONTACT_DOMAIN_SUFFIX,
        "solo_requires_approval": SOLO_REQUIRES_APPROVAL,
        "shared_requires_approval": SHARED_REQUIRES_APPROVAL,
        "poll_interval_seconds": POLL_INTERVAL_SECONDS,
    }


@st.cache_resource
def get_service() -> ClaimService:
    catalog = load_catalog(CATALOG_PATH) if CATALOG_PATH else load_catalog_json(generate_catalog_document())
    logger.info("Claim service started (claim log: %s)", CLAIM_LOG_PATH or "in-memory")
    return build_service(catalog, CLAIM_LOG_PATH, default_rule_config())


def initialize_session_state():
    """Initialize all session state keys with defaults."""
    defaults = {
        "active_lot": None,
        "admin_name": "",
        "notices": [],
        "rule_config": default_rule_config(),
    }
    for key, default in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = default


# --- Getters ---

def get_rule_config() -> dict:
    return st.session_state.get("rule_config", {})


def get_active_lot() -> Optional[str]:
    return st.session_state.get("active_lot")


def get_reconciler() -> SyncReconciler:
    """Per-session reconciler; holds this session's tentative selection."""
    if "reconciler" not in st.session_state:
        service = get_service()
        interval = get_rule_config().get("poll_interval_seconds", POLL_INTERVAL_SECONDS)
        st.session_state["reconciler"] = SyncReconciler(service.catalog, service.claim_log, interval)
    return st.session_state["reconciler"]


def get_admin_name() -> str:
    return st.session_state.get("admin_name", "")


def pop_notices() -> list:
    notices = st.session_state.get("notices", [])
    st.session_state["notices"] = []
    return notices


# --- Setters ---

def set_active_lot(lot_id: str):
    st.session_state["active_lot"] = lot_id
    get_reconciler().lot_id = lot_id


def set_admin_name(name: str):
    st.session_state["admin_name"] = name


def add_notice(message: str):
    st.session_state.setdefault("notices", []).append(message)
