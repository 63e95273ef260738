# mailer/loops/models.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, List, Optional, Union
from enum import Enum

Scalar = Union[str, int, float, bool, None]
ContactProperties = Dict[str, Scalar]

class OptInStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"

SETTLED_STATUSES = {OptInStatus.ACCEPTED, OptInStatus.REJECTED}

class MailingList(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    description: Optional[str] = None
    is_public: bool = Field(False, alias="isPublic")

class TransactionalEmail(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    data_variables: List[str] = Field(default_factory=list, alias="dataVariables")

class ContactProperty(BaseModel):
    key: str
    label: Optional[str] = None
    type: str

class Contact(BaseModel):
    """Subscriber as seen by this service.

    ``opt_in_status`` is the reconciled value, see reconcile_opt_in_status().
    Any other directory property is kept as an extra field.
    """
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str
    email: str
    subscribed: bool = False
    mailing_lists: Dict[str, bool] = Field(default_factory=dict, alias="mailingLists")
    opt_in_status: Optional[OptInStatus] = Field(None, alias="optInStatus")
    referer: Optional[str] = None

    def is_member_of(self, mailing_list_id: str) -> bool:
        return self.mailing_lists.get(mailing_list_id, False)
