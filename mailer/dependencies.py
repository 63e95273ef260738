# mailer/dependencies.py
from fastapi import Request
from mailer.auth.tokens import TokenService
from mailer.captcha.recaptcha import get_captcha_verifier
from mailer.config import Settings
from mailer.loops.client import LoopsClient
from mailer.loops.service import ContactDirectory
from mailer.subscription.service import SubscriptionService
from datetime import timedelta

def setup_services(state, settings: Settings):
    """Build the services once at startup; they never change afterwards"""
    state.settings = settings
    state.contact_directory = ContactDirectory(
        LoopsClient(
            settings.loops_so_secret,
            base_url=settings.loops_api_url,
            timeout=settings.loops_timeout
        ),
        company_name=settings.company_name,
        company_address=settings.company_address,
        company_logo=settings.company_logo
    )
    state.token_service = TokenService(settings.jwt_secret, timedelta(days=settings.jwt_expire_days))
    state.subscription_service = SubscriptionService(
        state.contact_directory,
        get_captcha_verifier(settings),
        state.token_service
    )

def get_settings(request: Request) -> Settings:
    return request.app.state.settings

def get_contact_directory(request: Request) -> ContactDirectory:
    return request.app.state.contact_directory

def get_subscription_service(request: Request) -> SubscriptionService:
    return request.app.state.subscription_service
