"""
Unit tests for the Loops REST client.
Requests are served by an httpx.MockTransport, nothing leaves the process.
"""

import json

import httpx
import pytest

from mailer.loops.client import LoopsAPIError, LoopsClient, LoopsRateLimitError


def make_client(handler):
    requests = []

    def recorder(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return handler(request)

    client = LoopsClient("test-api-key", transport=httpx.MockTransport(recorder))
    return client, requests


class TestContacts:

    @pytest.mark.asyncio
    async def test_find_contact_queries_by_email(self):
        client, requests = make_client(lambda request: httpx.Response(200, json=[{"id": "c-1"}]))

        result = await client.find_contact("test+news@example.com")

        assert result == [{"id": "c-1"}]
        request = requests[0]
        assert request.method == "GET"
        assert request.url.path == "/api/v1/contacts/find"
        assert request.url.params["email"] == "test+news@example.com"
        assert request.headers["Authorization"] == "Bearer test-api-key"

    @pytest.mark.asyncio
    async def test_create_contact_flattens_properties(self):
        client, requests = make_client(lambda request: httpx.Response(200, json={"success": True, "id": "c-1"}))

        result = await client.create_contact(
            "new@example.com",
            properties={"firstName": "John", "xOptInStatus": "pending"},
            mailing_lists={"list-1": True}
        )

        assert result["id"] == "c-1"
        assert requests[0].method == "POST"
        assert requests[0].url.path == "/api/v1/contacts/create"
        assert json.loads(requests[0].content) == {
            "email": "new@example.com",
            "firstName": "John",
            "xOptInStatus": "pending",
            "mailingLists": {"list-1": True},
        }

    @pytest.mark.asyncio
    async def test_update_contact_without_mailing_lists_omits_them(self):
        client, requests = make_client(lambda request: httpx.Response(200, json={"success": True, "id": "c-1"}))

        await client.update_contact("test@example.com", properties={"subscribed": False})

        assert requests[0].method == "PUT"
        assert requests[0].url.path == "/api/v1/contacts/update"
        assert json.loads(requests[0].content) == {"email": "test@example.com", "subscribed": False}

    @pytest.mark.asyncio
    async def test_custom_properties(self):
        client, requests = make_client(lambda request: httpx.Response(200, json=[]))

        await client.get_custom_properties()
        await client.create_contact_property("language", "string")

        assert requests[0].url.params["list"] == "custom"
        assert requests[1].method == "POST"
        assert json.loads(requests[1].content) == {"name": "language", "type": "string"}


class TestTransactional:

    @pytest.mark.asyncio
    async def test_first_page_has_no_cursor(self):
        client, requests = make_client(
            lambda request: httpx.Response(200, json={"pagination": {"nextCursor": None}, "data": []})
        )

        await client.get_transactional_emails()

        assert requests[0].url.params["perPage"] == "20"
        assert "cursor" not in requests[0].url.params

    @pytest.mark.asyncio
    async def test_next_page_passes_cursor(self):
        client, requests = make_client(
            lambda request: httpx.Response(200, json={"pagination": {"nextCursor": None}, "data": []})
        )

        await client.get_transactional_emails(per_page=10, cursor="abc")

        assert requests[0].url.params["perPage"] == "10"
        assert requests[0].url.params["cursor"] == "abc"

    @pytest.mark.asyncio
    async def test_empty_cursor_is_still_sent(self):
        client, requests = make_client(
            lambda request: httpx.Response(200, json={"pagination": {"nextCursor": None}, "data": []})
        )

        await client.get_transactional_emails(cursor="")

        assert requests[0].url.params["cursor"] == ""

    @pytest.mark.asyncio
    async def test_send_transactional_email(self):
        client, requests = make_client(lambda request: httpx.Response(200, json={"success": True}))

        await client.send_transactional_email("tx-1", "test@example.com", {"xOptInUrl": "https://example.com"})

        assert json.loads(requests[0].content) == {
            "transactionalId": "tx-1",
            "email": "test@example.com",
            "dataVariables": {"xOptInUrl": "https://example.com"},
        }


class TestErrors:

    @pytest.mark.asyncio
    async def test_error_status_raises_api_error(self):
        client, _ = make_client(
            lambda request: httpx.Response(400, json={"success": False, "message": "Invalid email"})
        )

        with pytest.raises(LoopsAPIError) as exc_info:
            await client.create_contact("bad")

        assert exc_info.value.status_code == 400
        assert "Invalid email" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_rate_limit_raises_dedicated_error(self):
        client, _ = make_client(lambda request: httpx.Response(429, text="Too many requests"))

        with pytest.raises(LoopsRateLimitError) as exc_info:
            await client.get_mailing_lists()

        assert exc_info.value.status_code == 429
        assert exc_info.value.payload == "Too many requests"
