"""Application configuration."""

import os
from decimal import Decimal

from pydantic_settings import BaseSettings, SettingsConfigDict

from merch_redemption.domain.redemption import (
    DEFAULT_PRIZE_NAMES,
    DeliveryFee,
    RedemptionConfig,
)

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

SOLANA_MAINNET = "solana:5eykt4UsFv8P8NJdTREpY1vzqKqZKvdp"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    solana_rpc_url: str
    supabase_url: str
    supabase_service_key: str
    environment: str = _ENVIRONMENT
    action_version: str = "2.2"
    blockchain_ids: str = SOLANA_MAINNET
    route_prefix: str = ""
    action_icon_url: str = (
        "https://ucarecdn.com/6f0bf147-e745-45c8-b181-e8869b7577bc/"
        "-/preview/880x880/-/format/auto/-/quality/smart/"
    )
    merch_collection_address: str = "96zvmKqKJJ7LBx6PqQhPDTmCXaVnqiqMJSgHwgbtbiyq"
    prize_names: str | None = None
    delivery_fee_address: str = "9yhrkxMKfvzzaUDYcwxNCwsgVbjyC2u9dYCA3166GsCt"
    delivery_fee_amount: Decimal = Decimal(15)
    delivery_fee_mint: str = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
    delivery_fee_currency: str = "USDC"
    delivery_fee_decimals: int = 6

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_csv(raw: str | None) -> tuple[str, ...]:
    """Split a comma-separated env value, dropping blanks."""
    if raw is None:
        return ()
    return tuple(chunk.strip() for chunk in raw.split(",") if chunk.strip())


def build_redemption_config(settings: Settings) -> RedemptionConfig:
    """Freeze the redemption constants from settings."""
    return RedemptionConfig(
        collection_address=settings.merch_collection_address,
        prize_names=parse_csv(settings.prize_names) or DEFAULT_PRIZE_NAMES,
        delivery_fee=DeliveryFee(
            amount=settings.delivery_fee_amount,
            currency=settings.delivery_fee_currency,
            mint=settings.delivery_fee_mint,
            decimals=settings.delivery_fee_decimals,
            payee=settings.delivery_fee_address,
        ),
        icon_url=settings.action_icon_url,
        route_prefix=settings.route_prefix.rstrip("/"),
    )
