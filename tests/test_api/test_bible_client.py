"""Tests for the API.Bible client."""

import asyncio
import socket
import time
from unittest.mock import MagicMock

import pytest
import requests

from dailybread.api.bible import BibleAPIClient, PassageResult
from dailybread.api.connectivity import NetworkMonitor, StaticNetwork
from dailybread.api.errors import (
    LIMITER_DENIED_MESSAGE,
    BibleAPIError,
    ErrorCode,
    classify_status,
)
from dailybread.api.ratelimit import RateLimiter


def _ok(payload: dict) -> MagicMock:
    response = MagicMock()
    response.json.return_value = payload
    response.raise_for_status.return_value = None
    return response


def _http_error(status: int, body=None) -> MagicMock:
    error_response = MagicMock()
    error_response.status_code = status
    error_response.json.return_value = body or {}
    response = MagicMock()
    response.raise_for_status.side_effect = requests.exceptions.HTTPError(response=error_response)
    return response


@pytest.fixture
def client(fake_sleep):
    """Client with a mocked session, no cooldown and an online network."""
    client = BibleAPIClient(
        api_key="test-key",
        base_url="https://bible.test/v1",
        network=StaticNetwork(online=True),
        sleep=fake_sleep,
    )
    client._session = MagicMock()
    return client


class TestErrorClassification:
    """Tests for HTTP status classification."""

    @pytest.mark.parametrize(
        "status,code",
        [
            (429, ErrorCode.RATE_LIMIT_EXCEEDED),
            (401, ErrorCode.UNAUTHORIZED),
            (403, ErrorCode.FORBIDDEN),
            (500, ErrorCode.SERVER_ERROR),
            (503, ErrorCode.SERVER_ERROR),
            (404, ErrorCode.UNKNOWN_ERROR),
        ],
    )
    def test_classify_status(self, status, code):
        assert classify_status(status) == code

    def test_static_fallback_codes(self):
        assert BibleAPIError(ErrorCode.UNAUTHORIZED).falls_back_to_static
        assert BibleAPIError(ErrorCode.SERVER_ERROR).falls_back_to_static
        assert not BibleAPIError(ErrorCode.TIMEOUT).falls_back_to_static

    def test_only_rate_limit_is_retryable(self):
        assert BibleAPIError(ErrorCode.RATE_LIMIT_EXCEEDED, status=429).retryable
        assert not BibleAPIError(ErrorCode.TIMEOUT).retryable
        assert not BibleAPIError(ErrorCode.SERVER_ERROR).retryable

    def test_default_message(self):
        error = BibleAPIError(ErrorCode.FORBIDDEN)
        assert error.message == "Access denied. Check your API permissions."


class TestRequests:
    """Tests for request handling."""

    def test_headers(self):
        client = BibleAPIClient(api_key="abc123", network=StaticNetwork())
        assert client._session.headers["api-key"] == "abc123"

    def test_get_passage(self, client, fake_sleep):
        client._session.get.return_value = _ok(
            {"data": {"content": "In the beginning", "reference": "Genesis 1", "verseCount": 31}}
        )

        result = asyncio.run(client.get_passage("bible-1", "GEN", 1))

        assert result == PassageResult(
            bible_id="bible-1",
            book_id="GEN",
            chapter_number=1,
            content="In the beginning",
            reference="Genesis 1",
            verse_count=31,
        )
        url = client._session.get.call_args[0][0]
        assert url == "https://bible.test/v1/bibles/bible-1/passages/GEN.1"
        assert fake_sleep.calls == [0.5]

    def test_search_url(self, client):
        client._session.get.return_value = _ok({"data": {"verses": []}})

        asyncio.run(client.search("bible-1", "love one another", limit=5, book_ids=["JHN", "1JN"]))

        url = client._session.get.call_args[0][0]
        assert "/bibles/bible-1/search?" in url
        assert "query=love%20one%20another" in url
        assert "limit=5" in url
        assert "bookIds=JHN%2C1JN" in url

    def test_unauthorized(self, client):
        client._session.get.return_value = _http_error(401)

        with pytest.raises(BibleAPIError) as exc:
            asyncio.run(client.get_books("bible-1"))

        assert exc.value.code == ErrorCode.UNAUTHORIZED
        assert exc.value.status == 401

    def test_unknown_status_message(self, client):
        client._session.get.return_value = _http_error(404)

        with pytest.raises(BibleAPIError) as exc:
            asyncio.run(client.get_bible("missing"))

        assert exc.value.code == ErrorCode.UNKNOWN_ERROR
        assert exc.value.message == "HTTP error: 404"

    def test_timeout(self, client):
        client._session.get.side_effect = requests.exceptions.Timeout()

        with pytest.raises(BibleAPIError) as exc:
            asyncio.run(client.get_bibles())

        assert exc.value.code == ErrorCode.TIMEOUT
        assert "15 seconds" in exc.value.message

    def test_connection_error(self, client):
        client._session.get.side_effect = requests.exceptions.ConnectionError("boom")

        with pytest.raises(BibleAPIError) as exc:
            asyncio.run(client.get_bibles())

        assert exc.value.code == ErrorCode.UNKNOWN_ERROR


class TestAdmission:
    """Tests for limiter and connectivity checks before sending."""

    def test_limiter_denial_skips_network(self, client, clock):
        client.limiter = RateLimiter(max_requests=1, clock=clock)
        client._session.get.return_value = _ok({"data": []})

        async def scenario():
            await client.get_bibles()
            await client.get_books("bible-1")

        with pytest.raises(BibleAPIError) as exc:
            asyncio.run(scenario())

        assert exc.value.code == ErrorCode.RATE_LIMIT_EXCEEDED
        assert exc.value.message == LIMITER_DENIED_MESSAGE
        assert client._session.get.call_count == 1

    def test_offline_skips_network(self, client):
        client.network = StaticNetwork(online=False)

        with pytest.raises(BibleAPIError) as exc:
            asyncio.run(client.get_bibles())

        assert exc.value.code == ErrorCode.OFFLINE
        client._session.get.assert_not_called()

    def test_concurrent_identical_calls_send_once(self, client):
        client._session.get.return_value = _ok({"data": [{"id": "GEN"}]})

        async def scenario():
            return await asyncio.gather(
                client.get_books("bible-1"), client.get_books("bible-1")
            )

        first, second = asyncio.run(scenario())

        assert first == second == [{"id": "GEN"}]
        assert client._session.get.call_count == 1


class TestNetworkMonitor:
    """Tests for the cached connectivity probe."""

    def test_override(self):
        monitor = NetworkMonitor()
        monitor.set_override(False)
        assert asyncio.run(monitor.is_online()) is False

    def test_probe_result_is_cached(self, clock, monkeypatch):
        monitor = NetworkMonitor(ttl=30.0, clock=clock)
        probes = []
        monkeypatch.setattr(monitor, "_probe", lambda: probes.append(1) or True)

        assert asyncio.run(monitor.is_online())
        assert asyncio.run(monitor.is_online())
        clock.advance(31)
        assert asyncio.run(monitor.is_online())

        assert len(probes) == 2

    def test_slow_connect_does_not_block_the_loop(self, monkeypatch):
        monitor = NetworkMonitor()

        def slow_connect(address, timeout=None):
            time.sleep(0.3)
            return MagicMock()

        monkeypatch.setattr(socket, "create_connection", slow_connect)

        async def scenario():
            ticks = []

            async def ticker():
                while True:
                    ticks.append(time.monotonic())
                    await asyncio.sleep(0.02)

            task = asyncio.create_task(ticker())
            online = await monitor.is_online()
            task.cancel()
            return online, ticks

        online, ticks = asyncio.run(scenario())

        assert online is True
        gaps = [b - a for a, b in zip(ticks, ticks[1:])]
        assert len(ticks) >= 5
        assert max(gaps) < 0.2
