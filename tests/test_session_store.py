"""Tests for the process-wide claim service."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from config.defaults import POLL_INTERVAL_SECONDS, REQUESTER_ID_LENGTH
from data.catalog_loader import load_catalog_json
from data.sample_data import generate_catalog_document
from data.session_store import build_service, default_rule_config


class TestRuleConfig:
    def test_defaults(self):
        cfg = default_rule_config()
        assert cfg["requester_id_length"] == REQUESTER_ID_LENGTH
        assert cfg["poll_interval_seconds"] == POLL_INTERVAL_SECONDS

    def test_each_call_is_independent(self):
        first = default_rule_config()
        first["requester_id_length"] = 4
        assert default_rule_config()["requester_id_length"] == REQUESTER_ID_LENGTH


class TestBuildService:
    def test_session_edits_do_not_reach_shared_engine(self):
        session_cfg = default_rule_config()
        service = build_service(load_catalog_json(generate_catalog_document()), rule_config=session_cfg)
        session_cfg["solo_requires_approval"] = False
        assert service.engine.rule_config["solo_requires_approval"] is True

    def test_engine_and_workflow_share_one_log(self):
        service = build_service(load_catalog_json(generate_catalog_document()))
        assert service.engine.claim_log is service.claim_log
        assert service.workflow.claim_log is service.claim_log


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
