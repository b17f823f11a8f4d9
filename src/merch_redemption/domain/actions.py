"""Response shapes returned by the redemption protocol."""

import base64
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from solders.transaction import VersionedTransaction


class ActionModel(BaseModel):
    """Base model serialized with camelCase aliases."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    def to_payload(self) -> dict[str, object]:
        """Dump to the JSON payload sent to clients."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class SelectOption(ActionModel):
    label: str
    value: str
    selected: bool | None = None


class ActionParameter(ActionModel):
    """A form field the client renders before posting."""

    name: str
    label: str
    type: Literal["text", "textarea", "email", "select"] = "text"
    required: bool = True
    options: list[SelectOption] | None = None


class LinkedAction(ActionModel):
    type: Literal["transaction", "post"] = "transaction"
    href: str
    label: str
    parameters: list[ActionParameter] | None = None


class ActionLinks(ActionModel):
    actions: list[LinkedAction]


class PostNextLink(ActionModel):
    type: Literal["post"] = "post"
    href: str


class NextLinks(ActionModel):
    next: PostNextLink


class ReferenceMetadata(ActionModel):
    reference: str


class ActionMenu(ActionModel):
    """Metadata plus links to the next actions; may be disabled."""

    type: Literal["action"] = "action"
    title: str
    icon: str
    description: str
    label: str
    disabled: bool | None = None
    links: ActionLinks | None = None


class TransactionProposal(ActionModel):
    """An unsigned transaction for the wallet to sign and broadcast."""

    type: Literal["transaction"] = "transaction"
    transaction: str
    dialect_experimental: ReferenceMetadata = Field(alias="dialectExperimental")
    links: NextLinks

    @classmethod
    def from_transaction(
        cls, transaction: VersionedTransaction, reference: str, next_href: str
    ) -> "TransactionProposal":
        """Wrap an unsigned transaction in its base64 wire encoding."""
        return cls(
            transaction=base64.b64encode(bytes(transaction)).decode(),
            dialectExperimental=ReferenceMetadata(reference=reference),
            links=NextLinks(next=PostNextLink(href=next_href)),
        )

    @property
    def reference(self) -> str:
        return self.dialect_experimental.reference


class CompletedAction(ActionModel):
    """Terminal acknowledgment ending the chain."""

    type: Literal["completed"] = "completed"
    title: str
    icon: str
    description: str
    label: str


class ActionError(ActionModel):
    message: str
