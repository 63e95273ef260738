"""
Shared fixtures for the test suite.
Environment variables are set before any mailer module is imported.
"""

import os

os.environ['LOOPS_SO_SECRET'] = 'test-loops-api-key'
os.environ['JWT_SECRET'] = 'test-secret-key-for-jwt-signing'
os.environ['CAPTCHA_PROVIDER'] = 'recaptcha'
os.environ['RECAPTCHA_SECRET'] = 'test-recaptcha-secret'
os.environ['RECAPTCHA_SITE_KEY'] = 'test-site-key'
os.environ['COMPANY_NAME'] = 'Test Company'
os.environ['COMPANY_ADDRESS'] = '123 Test St'
os.environ['COMPANY_LOGO'] = 'https://example.com/logo.png'
os.environ['ENVIRONMENT'] = 'development'

import pytest
from unittest.mock import AsyncMock

from mailer.loops.client import LoopsClient


@pytest.fixture()
def loops_client():
    """LoopsClient with every API call mocked."""
    client = AsyncMock(spec=LoopsClient)
    client.find_contact.return_value = []
    client.get_mailing_lists.return_value = []
    return client


def page(data, next_cursor=None):
    """One page of a cursor paginated Loops listing."""
    return {
        "success": True,
        "pagination": {
            "nextCursor": next_cursor,
            "nextPage": f"https://app.loops.so/api/v1/transactional?cursor={next_cursor}" if next_cursor else None,
        },
        "data": data,
    }
