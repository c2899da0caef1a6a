"""Tests for the CharPage probe."""

import pytest

from charcheck.check import Availability, char_page_url, check_identifier, classify
from charcheck.config import ALERT_SELECTOR, PAGE_TIMEOUT

from fakes import FakePage


class TestClassify:

    def test_sentinel_is_available(self):
        assert classify("Not Found!") is Availability.AVAILABLE

    def test_other_text_is_unavailable(self):
        assert classify("Aranx") is Availability.UNAVAILABLE

    def test_missing_node_is_unavailable(self):
        assert classify(None) is Availability.UNAVAILABLE

    def test_comparison_is_exact(self):
        assert classify("not found!") is Availability.UNAVAILABLE
        assert classify("Not Found") is Availability.UNAVAILABLE


class TestCharPageUrl:

    def test_identifier_substituted_verbatim(self):
        url = char_page_url("Dark Lord")
        assert url.endswith("/CharPage?id=Dark Lord")
        assert url.startswith("https://")


class TestCheckIdentifier:

    @pytest.mark.asyncio
    async def test_available(self):
        page = FakePage(alerts={"carol": "Not Found!"})

        result = await check_identifier(page, "carol")

        assert result.status is Availability.AVAILABLE
        assert result.available
        url, wait_until, timeout = page.visits[0]
        assert url == char_page_url("carol")
        assert wait_until == "networkidle"
        assert timeout == PAGE_TIMEOUT
        assert page.selectors == [ALERT_SELECTOR]

    @pytest.mark.asyncio
    async def test_taken_name(self):
        page = FakePage(alerts={"alice": "Guardian"})

        result = await check_identifier(page, "alice")

        assert result.status is Availability.UNAVAILABLE
        assert not result.available

    @pytest.mark.asyncio
    async def test_missing_alert_node_on_loaded_page(self):
        page = FakePage(alerts={})

        result = await check_identifier(page, "dave")

        assert result.status is Availability.UNAVAILABLE

    @pytest.mark.asyncio
    async def test_timeout_is_indeterminate(self):
        page = FakePage(alerts={"eve": "Not Found!"}, timeouts={"eve"})

        result = await check_identifier(page, "eve")

        assert result.status is Availability.INDETERMINATE
        assert result.detail == "timeout"
        assert page.selectors == []

    @pytest.mark.asyncio
    async def test_navigation_error_is_indeterminate(self):
        page = FakePage(nav_errors={"bob"})

        result = await check_identifier(page, "bob")

        assert result.status is Availability.INDETERMINATE
        assert "ERR_CONNECTION_RESET" in result.detail

    @pytest.mark.asyncio
    async def test_evaluation_error_is_indeterminate(self):
        page = FakePage(alerts={"bob": "Not Found!"}, eval_errors={"bob"})

        result = await check_identifier(page, "bob")

        assert result.status is Availability.INDETERMINATE
