"""Tests for the eligibility rules."""

import asyncio

from solders.keypair import Keypair

from merch_redemption.services.eligibility import find_asset_by_name, unique_names
from tests.conftest import FEE_BASE_UNITS, make_asset


def test_filters_by_collection_and_prize_name(
    eligibility_service, asset_index, owner
) -> None:
    other_collection = str(Keypair().pubkey())
    asset_index.assets[str(owner)] = [
        make_asset(owner, "JUNK MAIL TEE"),
        make_asset(owner, "JUNK MAIL TEE", update_authority=other_collection),
        make_asset(owner, "JUNK MAIL TEE", update_authority=None),
        make_asset(owner, "MYSTERY TEE"),
        make_asset(owner, "LA BIKER TEE"),
    ]

    assets = asyncio.run(eligibility_service.find_redeemable_assets(owner))

    assert sorted(asset.name for asset in assets) == ["JUNK MAIL TEE", "LA BIKER TEE"]


def test_redeemable_assets_are_ordered_by_address(
    eligibility_service, asset_index, owner
) -> None:
    asset_index.give(owner, "JUNK MAIL TEE", "JUNK MAIL TEE", "FTX THE MOVIE")

    first = asyncio.run(eligibility_service.find_redeemable_assets(owner))
    asset_index.assets[str(owner)].reverse()
    second = asyncio.run(eligibility_service.find_redeemable_assets(owner))

    assert [asset.address for asset in first] == [asset.address for asset in second]
    assert [asset.address for asset in first] == sorted(
        asset.address for asset in first
    )


def test_fee_affordable_at_exact_amount(eligibility_service, rpc, owner) -> None:
    rpc.fund(owner, FEE_BASE_UNITS)

    assert asyncio.run(eligibility_service.is_fee_affordable(owner)) is True


def test_fee_not_affordable_one_unit_short(eligibility_service, rpc, owner) -> None:
    rpc.fund(owner, FEE_BASE_UNITS - 1)

    assert asyncio.run(eligibility_service.is_fee_affordable(owner)) is False


def test_fee_not_affordable_without_token_account(eligibility_service, owner) -> None:
    assert asyncio.run(eligibility_service.is_fee_affordable(owner)) is False


def test_unique_names_keep_first_seen_order(owner) -> None:
    assets = [
        make_asset(owner, "JUNK MAIL TEE"),
        make_asset(owner, "FTX THE MOVIE"),
        make_asset(owner, "JUNK MAIL TEE"),
    ]

    assert unique_names(assets) == ["JUNK MAIL TEE", "FTX THE MOVIE"]


def test_find_asset_by_name_returns_first_match(owner) -> None:
    assets = [
        make_asset(owner, "FTX THE MOVIE"),
        make_asset(owner, "JUNK MAIL TEE"),
        make_asset(owner, "JUNK MAIL TEE"),
    ]

    assert find_asset_by_name(assets, "JUNK MAIL TEE") is assets[1]
    assert find_asset_by_name(assets, "LA BIKER TEE") is None
