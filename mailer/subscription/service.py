# mailer/subscription/service.py
from urllib.parse import urlencode
from mailer.auth.tokens import TokenService
from mailer.errors import NotFoundError, TryAgainLaterError
from mailer.loops.models import OptInStatus
from mailer.loops.service import ContactDirectory
from mailer.subscription.models import (
    MailingListStatus, SubscribeRequest, SubscribeResponse,
    SubscriptionStatus, UpdateSubscriptionRequest, UpdateSubscriptionResponse
)
import logging

logger = logging.getLogger(__name__)

CONTROL_PANEL_PATH = "/control-panel"


class SubscriptionService:
    """Double opt-in flow over one contact at a time.

    Nothing is kept between requests; the contact state lives in Loops.
    """

    def __init__(self, directory: ContactDirectory, captcha, tokens: TokenService):
        self.directory = directory
        self.captcha = captcha
        self.tokens = tokens

    async def subscribe(self, request: SubscribeRequest, origin: str) -> SubscribeResponse:
        """First step of the subscription, the e-mail is not confirmed yet.

        Sends the confirmation e-mail with a control panel link unless the
        contact already accepted every requested mailing list. ``origin`` is
        the scheme and host the request was made to.
        """
        logger.info(f"Subscription request for {request.email}")

        if not await self.captcha.verify("subscribe", request.captcha_token):
            raise TryAgainLaterError(
                "Try again later",
                reason="captcha-failed",
                details="Requestor categorized as bot"
            )

        contact = await self.directory.upsert_contact(
            request.email,
            request.contact_properties(),
            request.mailing_lists
        )

        if contact.opt_in_status == OptInStatus.REJECTED:
            raise TryAgainLaterError(
                "Try again later",
                reason="opt-in-rejected",
                details=f"Contact rejected subscription before {contact.email}"
            )
        if contact.opt_in_status == OptInStatus.ACCEPTED:
            logger.info(f"Contact already subscribed: {contact.email}")
            if all(contact.is_member_of(list_id) for list_id in request.mailing_lists):
                logger.info("Already subscribed for all requested mailing lists - do not send e-mail")
                return SubscribeResponse(double_opt_in=False, email=contact.email)

        await self.directory.send_confirmation_mail(
            contact.email,
            self.control_panel_url(contact.email, origin, request.language),
            request.language
        )
        return SubscribeResponse(double_opt_in=True, email=contact.email)

    def control_panel_url(self, email: str, origin: str, language=None) -> str:
        params = {"token": self.tokens.create_token(email, origin)}
        if language is not None:
            params["lang"] = language
        return f"{origin.rstrip('/')}{CONTROL_PANEL_PATH}?{urlencode(params)}"

    async def get_subscription(self, email: str) -> SubscriptionStatus:
        contact = await self.directory.find_contact(email)
        if contact is None:
            raise NotFoundError("Contact not found")

        # Every current public list is listed, new ones show up unsubscribed
        mailing_lists = await self.directory.get_mailing_lists()
        return SubscriptionStatus(
            email=contact.email,
            subscribed=contact.subscribed,
            opt_in_status=contact.opt_in_status,
            referer=contact.referer,
            mailing_lists=[
                MailingListStatus(
                    id=mailing_list.id,
                    name=mailing_list.name,
                    description=mailing_list.description,
                    is_public=mailing_list.is_public,
                    subscribed=contact.is_member_of(mailing_list.id)
                )
                for mailing_list in mailing_lists
            ]
        )

    async def update_subscription(self, request: UpdateSubscriptionRequest) -> UpdateSubscriptionResponse:
        if request.subscribe:
            await self.directory.subscribe_contact(request.email, request.mailing_lists)
        else:
            # Memberships are kept, the contact just stops receiving mail
            await self.directory.unsubscribe_contact(request.email)
        return UpdateSubscriptionResponse(email=request.email, subscribed=request.subscribe)
