# mailer/loops/service.py
from typing import Any, Dict, List, Optional
from mailer.errors import ConfigurationError
from mailer.loops.client import LoopsClient
from mailer.loops.models import (
    Contact, ContactProperties, ContactProperty, MailingList,
    OptInStatus, SETTLED_STATUSES, TransactionalEmail
)
from mailer.loops.pagination import drain
import logging

logger = logging.getLogger(__name__)

# Custom contact property holding our own double opt-in status
OPT_IN_STATUS_PROPERTY = "xOptInStatus"
# Data variable a transactional e-mail must expect to qualify as confirmation mail
OPT_IN_URL_VARIABLE = "xOptInUrl"

CUSTOM_PROPERTIES = {
    # Language preferred by the contact; ISO 639 code
    "language": "string",
    OPT_IN_STATUS_PROPERTY: "string",
}

# Keys callers may not set through free-form contact properties
RESERVED_PROPERTIES = {"id", "email", "subscribed", "mailingLists", "optInStatus", OPT_IN_STATUS_PROPERTY}


def _parse_status(value: Any) -> Optional[OptInStatus]:
    try:
        return OptInStatus(value)
    except ValueError:
        return None


def reconcile_opt_in_status(custom: Any, built_in: Any) -> Optional[OptInStatus]:
    """Merge the custom opt-in status with the one Loops maintains.

    A settled (accepted/rejected) custom status always wins. Otherwise a
    settled built-in status is used, so a contact confirmed through Loops'
    own double opt-in is not asked again. When neither is settled the custom
    value is returned as is, possibly None.
    """
    custom = _parse_status(custom)
    built_in = _parse_status(built_in)
    if custom in SETTLED_STATUSES:
        return custom
    if built_in in SETTLED_STATUSES:
        return built_in
    return custom


def contact_from_loops(data: Dict[str, Any]) -> Contact:
    fields = {key: value for key, value in data.items() if key not in ("optInStatus", OPT_IN_STATUS_PROPERTY)}
    fields["mailingLists"] = data.get("mailingLists") or {}
    fields["optInStatus"] = reconcile_opt_in_status(data.get(OPT_IN_STATUS_PROPERTY), data.get("optInStatus"))
    return Contact(**fields)


class ContactDirectory:
    """Subscriber semantics on top of Loops contacts, lists and e-mails"""

    def __init__(
        self,
        client: LoopsClient,
        company_name: str = "",
        company_address: str = "",
        company_logo: Optional[str] = None
    ):
        self.client = client
        self.company_name = company_name
        self.company_address = company_address
        self.company_logo = company_logo

    async def initialize_custom_properties(self) -> None:
        """Create the custom contact properties unless they already exist.

        Properties are matched by key only, an existing property of another
        type is left alone.

        See https://loops.so/docs/contacts/properties
        """
        existing = [ContactProperty(**prop) for prop in await self.client.get_custom_properties()]
        keys = {prop.key for prop in existing}
        for name, type_ in CUSTOM_PROPERTIES.items():
            if name in keys:
                logger.info(f"Property {name} already exists")
                continue
            logger.info(f"Creating {name} property")
            await self.client.create_contact_property(name, type_)
        logger.info("Loops initialized successfully")

    async def get_mailing_lists(self) -> List[MailingList]:
        """Publicly available mailing lists only"""
        mailing_lists = [MailingList(**data) for data in await self.client.get_mailing_lists()]
        return [mailing_list for mailing_list in mailing_lists if mailing_list.is_public]

    async def find_contact(self, email: str) -> Optional[Contact]:
        matching = await self.client.find_contact(email)
        if not matching:
            return None
        logger.debug(f"find_contact: {matching[0]}")
        return contact_from_loops(matching[0])

    async def upsert_contact(
        self,
        email: str,
        properties: ContactProperties,
        mailing_list_ids: Optional[List[str]] = None
    ) -> Contact:
        """Return the existing contact or create a pending one.

        New contacts join the given mailing lists, or every public list when
        none are given. Existing contacts are returned unchanged.
        """
        existing = await self.find_contact(email)
        if existing is not None:
            return existing

        if not mailing_list_ids:
            mailing_list_ids = [mailing_list.id for mailing_list in await self.get_mailing_lists()]
        mailing_lists = {list_id: True for list_id in mailing_list_ids}

        extra = {}
        for key, value in properties.items():
            if key in RESERVED_PROPERTIES:
                logger.warning(f"Ignoring reserved contact property {key} for {email}")
                continue
            extra[key] = value

        response = await self.client.create_contact(
            email,
            properties={**extra, "subscribed": False, OPT_IN_STATUS_PROPERTY: OptInStatus.PENDING.value},
            mailing_lists=mailing_lists
        )
        logger.info(f"Contact created: {email}")
        return Contact(
            id=response["id"],
            email=email,
            subscribed=False,
            mailingLists=mailing_lists,
            optInStatus=OptInStatus.PENDING,
            **extra
        )

    async def subscribe_contact(self, email: str, mailing_lists: Optional[Dict[str, bool]] = None) -> None:
        """Mark the contact accepted; mailing lists are merged, not replaced"""
        await self.client.update_contact(
            email,
            properties={"subscribed": True, OPT_IN_STATUS_PROPERTY: OptInStatus.ACCEPTED.value},
            mailing_lists=mailing_lists
        )
        logger.info(f"Contact subscribed: {email}")

    async def unsubscribe_contact(self, email: str) -> None:
        await self.client.update_contact(
            email,
            properties={"subscribed": False, OPT_IN_STATUS_PROPERTY: OptInStatus.REJECTED.value}
        )
        logger.info(f"Contact unsubscribed: {email}")

    async def get_transactional_emails(self) -> List[TransactionalEmail]:
        """The whole transactional e-mail catalog, every page"""
        emails = await drain(self.client.get_transactional_emails)
        return [TransactionalEmail(**data) for data in emails]

    async def get_double_opt_in_email(self, language: Optional[str] = None) -> TransactionalEmail:
        """Pick the transactional e-mail used to confirm a subscription.

        Candidates expect the ``xOptInUrl`` data variable. A language code in
        the name (e.g. ``#PL``) selects a translation; otherwise the first
        candidate in catalog order is used.

        See https://app.loops.so/transactional
        """
        candidates = [
            email for email in await self.get_transactional_emails()
            if OPT_IN_URL_VARIABLE in email.data_variables
        ]
        if not candidates:
            raise ConfigurationError("No confirmation e-mail configured")

        if language:
            tag = f"#{language.upper()}"
            for email in candidates:
                if tag in email.name:
                    return email
        return candidates[0]

    async def send_confirmation_mail(self, email: str, confirmation_url: str, language: Optional[str] = None) -> None:
        template = await self.get_double_opt_in_email(language)
        logger.info(f"Sending {template.name} to {email}")
        await self.client.send_transactional_email(
            template.id,
            email,
            data_variables={
                "companyName": self.company_name,
                "companyAddress": self.company_address,
                "companyLogo": self.company_logo or "",
                OPT_IN_URL_VARIABLE: confirmation_url,
            }
        )
