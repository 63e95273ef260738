# mailer/subscription/__init__.py
from .service import SubscriptionService
from .models import SubscribeRequest, UpdateSubscriptionRequest

__all__ = [
    'SubscriptionService',
    'SubscribeRequest',
    'UpdateSubscriptionRequest'
]
