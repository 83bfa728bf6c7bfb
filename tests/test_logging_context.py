"""Tests for request-id aware logging."""

import logging

import pytest

from cleanconnect.logging_context import (
    RequestIdFilter,
    get_request_id,
    get_request_logger,
    request_scope,
    set_request_id,
)


class TestRequestLogger:
    def test_filter_attached_once(self):
        logger = get_request_logger("cleanconnect.tests.once")
        get_request_logger("cleanconnect.tests.once")
        assert sum(isinstance(f, RequestIdFilter) for f in logger.filters) == 1

    def test_request_id_injected(self, caplog):
        set_request_id("bk_test123")
        logger = get_request_logger("cleanconnect.tests.inject")
        with caplog.at_level(logging.INFO, logger="cleanconnect.tests.inject"):
            logger.info("hello")
        assert get_request_id() == "bk_test123"
        assert caplog.records[-1].request_id == "bk_test123"

    def test_request_scope_restores_previous_id(self):
        set_request_id("outer")
        with request_scope("bk_inner") as bound:
            assert bound == "bk_inner"
            assert get_request_id() == "bk_inner"
        assert get_request_id() == "outer"

    def test_request_scope_restores_on_error(self):
        set_request_id("outer")
        with pytest.raises(RuntimeError):
            with request_scope("bk_inner"):
                raise RuntimeError("boom")
        assert get_request_id() == "outer"
