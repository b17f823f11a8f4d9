"""Pydantic models for action POST payloads."""

from pydantic import BaseModel, ConfigDict, Field

from merch_redemption.services.redemption import RedeemForm


class ActionPostRequest(BaseModel):
    """Body posted by the wallet for eligibility and form steps."""

    account: str


class RedeemFormData(BaseModel):
    """Shipping form values; missing values are reported by the redeem step."""

    model_config = ConfigDict(populate_by_name=True)

    name: str | None = None
    address: str | None = None
    country: str | None = None
    nft_name: str | None = Field(default=None, alias="nftName")
    size: str | None = None
    email: str | None = None

    def to_form(self) -> RedeemForm:
        return RedeemForm(
            name=self.name,
            country=self.country,
            address=self.address,
            email=self.email,
            nft_name=self.nft_name,
            size=self.size,
        )


class RedeemRequest(BaseModel):
    """Body posted with the filled shipping form."""

    account: str
    data: RedeemFormData | None = None


class NextActionPostRequest(BaseModel):
    """Body posted after the wallet broadcast the transaction."""

    account: str | None = None
    signature: str | None = None
