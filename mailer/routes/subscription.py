# mailer/routes/subscription.py
from fastapi import APIRouter, Depends, Request
from mailer.auth.dependencies import get_authenticated_email
from mailer.dependencies import get_subscription_service
from mailer.errors import ForbiddenError
from mailer.subscription.models import (
    SubscribeRequest, SubscribeResponse, SubscriptionStatus,
    UpdateSubscriptionRequest, UpdateSubscriptionResponse
)
from mailer.subscription.service import SubscriptionService
import logging

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/subscription", tags=["subscription"])

def request_origin(request: Request) -> str:
    return f"{request.url.scheme}://{request.url.netloc}"

@router.post("", response_model=SubscribeResponse)
async def subscribe(
    body: SubscribeRequest,
    request: Request,
    service: SubscriptionService = Depends(get_subscription_service)
):
    """Start the double opt-in, protected by CAPTCHA"""
    return await service.subscribe(body, request_origin(request))

@router.get("", response_model=SubscriptionStatus)
async def get_subscription(
    email: str = Depends(get_authenticated_email),
    service: SubscriptionService = Depends(get_subscription_service)
):
    """Subscription state for the control panel"""
    return await service.get_subscription(email)

@router.put("", response_model=UpdateSubscriptionResponse)
async def update_subscription(
    body: UpdateSubscriptionRequest,
    email: str = Depends(get_authenticated_email),
    service: SubscriptionService = Depends(get_subscription_service)
):
    """Confirm, change or cancel the subscription"""
    if body.email != email:
        raise ForbiddenError(details="E-mail address from request does not match JWT")
    return await service.update_subscription(body)
