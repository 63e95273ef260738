# mailer/loops/__init__.py
from .client import LoopsClient, LoopsAPIError, LoopsRateLimitError
from .models import Contact, MailingList, OptInStatus, TransactionalEmail
from .service import ContactDirectory, reconcile_opt_in_status

__all__ = [
    'LoopsClient',
    'LoopsAPIError',
    'LoopsRateLimitError',
    'Contact',
    'MailingList',
    'OptInStatus',
    'TransactionalEmail',
    'ContactDirectory',
    'reconcile_opt_in_status'
]
