"""Router swap endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from chainops.api.deps import get_services
from chainops.api.schemas import SwapRequest
from chainops.services.registry import Services

router = APIRouter()


@router.get("/swaps/quote/buy")
async def quote_buy(
    amount: str = Query(..., description="Stable token amount wanted"),
    network: Optional[str] = Query(None),
    services: Services = Depends(get_services),
):
    """Native currency needed to buy amount of the stable token."""
    quote = await services.swaps.eth_needed_for_output(amount, network)
    return {"success": True, "quote": quote.to_dict()}


@router.get("/swaps/quote/sell")
async def quote_sell(
    amount: str = Query(..., description="Stable token amount to sell"),
    network: Optional[str] = Query(None),
    services: Services = Depends(get_services),
):
    """Native currency received for selling amount of the stable token."""
    quote = await services.swaps.eth_receivable_for_input(amount, network)
    return {"success": True, "quote": quote.to_dict()}


@router.post("/swaps/buy")
async def buy(request: SwapRequest, services: Services = Depends(get_services)):
    result = await services.swaps.buy_stable_token(
        request.signer_ref(),
        request.amount,
        request.slippage_percent,
        request.network,
        request.deadline_seconds,
    )
    return {"success": True, **result.to_dict()}


@router.post("/swaps/sell")
async def sell(request: SwapRequest, services: Services = Depends(get_services)):
    """Sell the stable token; the router must already be approved."""
    result = await services.swaps.sell_stable_token(
        request.signer_ref(),
        request.amount,
        request.slippage_percent,
        request.network,
        request.deadline_seconds,
    )
    return {"success": True, **result.to_dict()}
