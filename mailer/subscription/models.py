# mailer/subscription/models.py
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Dict, List, Optional
from mailer.loops.models import ContactProperties, OptInStatus
from mailer.utils.validation import is_scalar, validate_email

class SubscribeRequest(BaseModel):
    """Public subscription form.

    Fields other than the known ones are kept and stored on the contact as
    free-form properties (firstName, userGroup, ...).
    """
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    email: str
    captcha_token: str = Field(alias="captchaToken")
    mailing_lists: List[str] = Field(default_factory=list, alias="mailingLists")
    language: Optional[str] = None
    referer: Optional[str] = None

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str) -> str:
        if not validate_email(value):
            raise ValueError("Invalid email address")
        return value

    @model_validator(mode="after")
    def check_extra_properties(self):
        for key, value in (self.model_extra or {}).items():
            if not is_scalar(value):
                raise ValueError(f"Property {key} must be a scalar")
        return self

    def contact_properties(self) -> ContactProperties:
        properties: ContactProperties = dict(self.model_extra or {})
        if self.language is not None:
            properties["language"] = self.language
        if self.referer is not None:
            properties["referer"] = self.referer
        return properties

class SubscribeResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    double_opt_in: bool = Field(alias="doubleOptIn")
    email: str

class MailingListStatus(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    description: Optional[str] = None
    is_public: bool = Field(True, alias="isPublic")
    subscribed: bool

class SubscriptionStatus(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    email: str
    subscribed: bool
    opt_in_status: Optional[OptInStatus] = Field(None, alias="optInStatus")
    mailing_lists: List[MailingListStatus] = Field(default_factory=list, alias="mailingLists")
    referer: Optional[str] = None

class UpdateSubscriptionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: str
    subscribe: bool
    # Per list membership, merged into the current one on subscribe
    mailing_lists: Optional[Dict[str, bool]] = Field(None, alias="mailingLists")

class UpdateSubscriptionResponse(BaseModel):
    success: bool = True
    email: str
    subscribed: bool
