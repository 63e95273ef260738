# mailer/loops/client.py - thin async wrapper around the Loops REST API
import httpx
from typing import Any, Dict, List, Optional
import logging

logger = logging.getLogger(__name__)


class LoopsAPIError(Exception):
    """Loops answered with a non-2xx status"""

    def __init__(self, status_code: int, payload: Any):
        self.status_code = status_code
        self.payload = payload
        message = payload.get("message") if isinstance(payload, dict) else payload
        super().__init__(f"Loops API error {status_code}: {message}")


class LoopsRateLimitError(LoopsAPIError):
    """Loops rate limit exceeded (HTTP 429)"""


class LoopsClient:
    """Loops API client.

    A new HTTP connection is opened for every call, nothing is kept between
    requests. ``transport`` lets tests plug in an ``httpx.MockTransport``.

    See https://loops.so/docs/api-reference
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://app.loops.so/api/v1",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None
    ) -> Any:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Accept": "application/json",
        }
        async with httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=self.timeout,
            transport=self.transport
        ) as client:
            response = await client.request(method, path, params=params, json=json)

        if response.is_success:
            return response.json()

        try:
            payload = response.json()
        except ValueError:
            payload = response.text
        logger.error(f"Loops {method} {path} failed with {response.status_code}")
        if response.status_code == 429:
            raise LoopsRateLimitError(response.status_code, payload)
        raise LoopsAPIError(response.status_code, payload)

    # Contacts

    async def find_contact(self, email: str) -> List[Dict[str, Any]]:
        return await self._request("GET", "/contacts/find", params={"email": email})

    async def create_contact(
        self,
        email: str,
        properties: Optional[Dict[str, Any]] = None,
        mailing_lists: Optional[Dict[str, bool]] = None
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {**(properties or {}), "email": email}
        if mailing_lists is not None:
            payload["mailingLists"] = mailing_lists
        return await self._request("POST", "/contacts/create", json=payload)

    async def update_contact(
        self,
        email: str,
        properties: Optional[Dict[str, Any]] = None,
        mailing_lists: Optional[Dict[str, bool]] = None
    ) -> Dict[str, Any]:
        # Omitting mailingLists leaves the current memberships untouched
        payload: Dict[str, Any] = {**(properties or {}), "email": email}
        if mailing_lists is not None:
            payload["mailingLists"] = mailing_lists
        return await self._request("PUT", "/contacts/update", json=payload)

    async def get_custom_properties(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/contacts/properties", params={"list": "custom"})

    async def create_contact_property(self, name: str, type: str) -> Dict[str, Any]:
        return await self._request("POST", "/contacts/properties", json={"name": name, "type": type})

    # Mailing lists

    async def get_mailing_lists(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/lists")

    # Transactional e-mails

    async def get_transactional_emails(
        self,
        per_page: int = 20,
        cursor: Optional[str] = None
    ) -> Dict[str, Any]:
        """One page of published transactional e-mails"""
        params: Dict[str, Any] = {"perPage": per_page}
        if cursor is not None:
            params["cursor"] = cursor
        return await self._request("GET", "/transactional", params=params)

    async def send_transactional_email(
        self,
        transactional_id: str,
        email: str,
        data_variables: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"transactionalId": transactional_id, "email": email}
        if data_variables:
            payload["dataVariables"] = data_variables
        return await self._request("POST", "/transactional", json=payload)
