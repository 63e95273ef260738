"""
Unit tests for reCAPTCHA verification.
Google's siteverify endpoint is replaced by an httpx.MockTransport.
"""

from urllib.parse import parse_qs

import httpx
import pytest

from mailer.captcha.recaptcha import (
    NoCaptchaVerifier,
    RecaptchaVerifier,
    captcha_configuration,
    get_captcha_verifier,
)
from mailer.config import Settings
from mailer.errors import BadRequestError, ConfigurationError, HttpError, TryAgainLaterError


def make_verifier(payload, status_code=200, threshold=0.5):
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(status_code, json=payload)

    verifier = RecaptchaVerifier("test-recaptcha-secret", threshold=threshold, transport=httpx.MockTransport(handler))
    return verifier, requests


def verification(**overrides):
    payload = {
        "success": True,
        "score": 0.9,
        "action": "subscribe",
        "challenge_ts": "2026-01-01T00:00:00Z",
        "hostname": "example.com",
    }
    payload.update(overrides)
    return payload


class TestRecaptchaVerifier:

    @pytest.mark.asyncio
    async def test_human_passes(self):
        verifier, requests = make_verifier(verification())

        assert await verifier.verify("subscribe", "captcha-token") is True
        form = parse_qs(requests[0].content.decode())
        assert form == {"secret": ["test-recaptcha-secret"], "response": ["captcha-token"]}
        assert str(requests[0].url) == "https://www.google.com/recaptcha/api/siteverify"

    @pytest.mark.asyncio
    async def test_low_score_fails(self):
        verifier, _ = make_verifier(verification(score=0.3))

        assert await verifier.verify("subscribe", "captcha-token") is False

    @pytest.mark.asyncio
    async def test_score_equal_to_threshold_passes(self):
        verifier, _ = make_verifier(verification(score=0.5))

        assert await verifier.verify("subscribe", "captcha-token") is True

    @pytest.mark.asyncio
    async def test_action_mismatch(self):
        verifier, _ = make_verifier(verification(action="login"))

        with pytest.raises(BadRequestError) as exc_info:
            await verifier.verify("subscribe", "captcha-token")

        assert exc_info.value.reason == "captcha-action-mismatch"

    @pytest.mark.asyncio
    async def test_invalid_token(self):
        verifier, _ = make_verifier({"success": False, "error-codes": ["invalid-input-response"]})

        with pytest.raises(BadRequestError) as exc_info:
            await verifier.verify("subscribe", "captcha-token")

        assert exc_info.value.status_code == 400
        assert exc_info.value.reason == "bad-captcha"

    @pytest.mark.asyncio
    async def test_timeout_or_duplicate(self):
        verifier, _ = make_verifier({"success": False, "error-codes": ["timeout-or-duplicate"]})

        with pytest.raises(TryAgainLaterError) as exc_info:
            await verifier.verify("subscribe", "captcha-token")

        assert exc_info.value.status_code == 429
        assert exc_info.value.reason == "captcha-timeout"

    @pytest.mark.asyncio
    async def test_other_error_codes_are_server_errors(self):
        verifier, _ = make_verifier({"success": False, "error-codes": ["invalid-input-secret"]})

        with pytest.raises(HttpError) as exc_info:
            await verifier.verify("subscribe", "captcha-token")

        assert exc_info.value.status_code == 500
        assert "invalid-input-secret" in exc_info.value.details

    @pytest.mark.asyncio
    async def test_unsuccessful_without_codes_is_server_error(self):
        verifier, _ = make_verifier({"success": False})

        with pytest.raises(HttpError) as exc_info:
            await verifier.verify("subscribe", "captcha-token")

        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_provider_outage_propagates(self):
        verifier, _ = make_verifier({}, status_code=503)

        with pytest.raises(httpx.HTTPStatusError):
            await verifier.verify("subscribe", "captcha-token")

    @pytest.mark.asyncio
    async def test_missing_secret(self):
        verifier = RecaptchaVerifier(None)

        with pytest.raises(ConfigurationError):
            await verifier.verify("subscribe", "captcha-token")


class TestProviderSelection:

    def make_settings(self, **overrides):
        return Settings(loops_so_secret="key", **overrides)

    def test_recaptcha(self):
        verifier = get_captcha_verifier(self.make_settings(captcha_provider="recaptcha", captcha_threshold=0.7))

        assert isinstance(verifier, RecaptchaVerifier)
        assert verifier.threshold == 0.7

    @pytest.mark.asyncio
    async def test_none_accepts_everything(self):
        verifier = get_captcha_verifier(self.make_settings(captcha_provider="none"))

        assert isinstance(verifier, NoCaptchaVerifier)
        assert await verifier.verify("subscribe", "") is True

    def test_hcaptcha_is_not_supported(self):
        with pytest.raises(ConfigurationError) as exc_info:
            get_captcha_verifier(self.make_settings(captcha_provider="hcaptcha"))

        assert "unsupported CAPTCHA provider" in exc_info.value.details

    def test_public_configuration(self):
        settings = self.make_settings(captcha_provider="recaptcha", recaptcha_site_key="site-key")

        assert captcha_configuration(settings) == {"success": True, "provider": "recaptcha", "site_key": "site-key"}
