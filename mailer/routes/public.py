# mailer/routes/public.py
from fastapi import APIRouter, Depends, Request
from typing import List
from mailer.captcha.recaptcha import captcha_configuration
from mailer.config import Settings
from mailer.dependencies import get_contact_directory, get_settings
from mailer.loops.models import MailingList
from mailer.loops.service import ContactDirectory
import logging

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["public"])

@router.get("/company")
async def get_company(settings: Settings = Depends(get_settings)):
    """Company identity shown by the widget"""
    return {
        "name": settings.company_name,
        "address": settings.company_address,
        "logo": settings.company_logo
    }

@router.get("/captcha")
async def get_captcha(settings: Settings = Depends(get_settings)):
    """CAPTCHA provider and site key, in case they are not prebuilt into the widget"""
    return captcha_configuration(settings)

@router.get("/lists", response_model=List[MailingList])
async def get_mailing_lists(directory: ContactDirectory = Depends(get_contact_directory)):
    return await directory.get_mailing_lists()

@router.post("/honeypot")
async def honeypot(request: Request):
    """Decoy form target, real clients never post here"""
    body = await request.body()
    client = request.client.host if request.client else None
    logger.warning(f"Honeypot request from {client}: {body[:1000]!r}")
    return {"success": True}

# Only mounted in development, see mailer.main
debug_router = APIRouter(prefix="/api", tags=["debug"])

@debug_router.get("/test")
async def request_info(request: Request):
    return {
        "hostname": request.url.hostname,
        "url": str(request.url),
        "ip": request.client.host if request.client else None,
        "forwarded_for": request.headers.get("x-forwarded-for")
    }
