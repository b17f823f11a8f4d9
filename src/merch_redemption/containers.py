"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from merch_redemption.adapters.mpl_core import MplCoreAssetIndex
from merch_redemption.adapters.solana_rpc_client import (
    HttpxSolanaRpcClient,
    SolanaRpcClient,
)
from merch_redemption.adapters.supabase_shipment_repository import (
    SupabaseShipmentRepository,
)
from merch_redemption.config import Settings, build_redemption_config
from merch_redemption.domain.redemption import RedemptionConfig
from merch_redemption.services.balances import BalanceResolver
from merch_redemption.services.composer import TransactionComposer
from merch_redemption.services.eligibility import EligibilityService
from merch_redemption.services.redemption import RedemptionService
from merch_redemption.services.shipments import ShipmentLedger
from merch_redemption.services.tasks import AsyncioTaskScheduler


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    config: RedemptionConfig
    rpc_client: SolanaRpcClient
    shipment_ledger: ShipmentLedger
    redemption_service: RedemptionService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    config = build_redemption_config(resolved_settings)
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    rpc_client = HttpxSolanaRpcClient.create(resolved_settings.solana_rpc_url)
    balance_resolver = BalanceResolver(rpc_client)
    eligibility_service = EligibilityService(
        asset_index=MplCoreAssetIndex(rpc_client),
        balance_resolver=balance_resolver,
        config=config,
    )
    composer = TransactionComposer(
        rpc=rpc_client,
        balance_resolver=balance_resolver,
        config=config,
    )
    shipment_ledger = ShipmentLedger(SupabaseShipmentRepository(supabase_client))
    scheduler = AsyncioTaskScheduler()
    redemption_service = RedemptionService(
        config=config,
        eligibility=eligibility_service,
        composer=composer,
        ledger=shipment_ledger,
        scheduler=scheduler,
    )

    async def close_resources() -> None:
        await scheduler.shutdown()
        await rpc_client.close()

    return AppContainer(
        settings=resolved_settings,
        config=config,
        rpc_client=rpc_client,
        shipment_ledger=shipment_ledger,
        redemption_service=redemption_service,
        close_resources=close_resources,
    )
