# mailer/captcha/recaptcha.py
import httpx
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field
from mailer.config import Settings
from mailer.errors import BadRequestError, ConfigurationError, HttpError, TryAgainLaterError
import logging

logger = logging.getLogger(__name__)

VERIFY_URL = "https://www.google.com/recaptcha/api/siteverify"


class RecaptchaResponse(BaseModel):
    """https://developers.google.com/recaptcha/docs/v3#site_verify_response"""
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    score: float = 0.0
    action: Optional[str] = None
    challenge_ts: Optional[str] = None
    hostname: Optional[str] = None
    error_codes: List[str] = Field(default_factory=list, alias="error-codes")


class RecaptchaVerifier:
    """Server side verification of reCAPTCHA v3 tokens"""

    def __init__(
        self,
        secret: Optional[str],
        threshold: float = 0.5,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.secret = secret
        self.threshold = threshold
        self.timeout = timeout
        self.transport = transport

    async def send_verification_request(self, token: str) -> RecaptchaResponse:
        if not self.secret:
            raise ConfigurationError("RECAPTCHA_SECRET not defined")

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            response = await client.post(
                VERIFY_URL,
                data={"secret": self.secret, "response": token},
                headers={"Accept": "application/json"}
            )
        response.raise_for_status()
        return RecaptchaResponse(**response.json())

    async def verify(self, action: str, token: str) -> bool:
        """Check a token presented by the user agent for ``action``.

        Returns False when the score is below the threshold. Malformed,
        expired or reused tokens raise instead.
        """
        captcha = await self.send_verification_request(token)
        logger.info(
            f"CAPTCHA: score={captcha.score} action={captcha.action} "
            f"challenge_ts={captcha.challenge_ts} hostname={captcha.hostname}"
        )

        if captcha.error_codes:
            errors = ", ".join(captcha.error_codes)
            logger.error(f"CAPTCHA error codes: {errors}")
            if "invalid-input-response" in captcha.error_codes:
                raise BadRequestError("Bad request", reason="bad-captcha", details=f"CAPTCHA error: {errors}")
            if "timeout-or-duplicate" in captcha.error_codes:
                raise TryAgainLaterError("Try again", reason="captcha-timeout", details=f"CAPTCHA error: {errors}")
            raise HttpError("Internal server error", details=f"CAPTCHA error: {errors}")

        if not captcha.success:
            raise HttpError("Internal server error", details="reCAPTCHA validation failed")

        if captcha.action != action:
            logger.error(f"CAPTCHA action does not match: expected={action} actual={captcha.action}")
            raise BadRequestError(
                "Bad request",
                reason="captcha-action-mismatch",
                details="CAPTCHA error: action-mismatch"
            )

        if captcha.score < self.threshold:
            logger.warning(f"CAPTCHA score below threshold {captcha.score}")
            return False

        return True


class NoCaptchaVerifier:
    """Accepts everything, for deployments without CAPTCHA"""

    async def verify(self, action: str, token: str) -> bool:
        return True


def get_captcha_verifier(settings: Settings):
    provider = settings.captcha_provider
    if provider == "recaptcha":
        return RecaptchaVerifier(settings.recaptcha_secret, threshold=settings.captcha_threshold)
    if provider == "none":
        logger.warning("CAPTCHA verification disabled")
        return NoCaptchaVerifier()
    raise ConfigurationError(f"unsupported CAPTCHA provider: {provider}")


def captcha_configuration(settings: Settings) -> Dict[str, Any]:
    """Public CAPTCHA settings for the browser widget"""
    return {"success": True, "provider": settings.captcha_provider, "site_key": settings.recaptcha_site_key}
