"""Read-only chain endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from chainops.api.deps import get_services
from chainops.api.schemas import ContractReadRequest
from chainops.services.registry import Services

router = APIRouter()


@router.get("/networks")
async def supported_networks(services: Services = Depends(get_services)):
    """List supported network keys."""
    return {"success": True, "networks": services.reader.get_supported_networks()}


@router.get("/chain")
async def chain_info(
    network: Optional[str] = Query(None, description="Network name or chain id"),
    services: Services = Depends(get_services),
):
    """Chain id, latest block number and RPC endpoint."""
    return {"success": True, **await services.reader.get_chain_info(network)}


@router.get("/names/{name}")
async def resolve_name(
    name: str,
    network: Optional[str] = Query(None),
    services: Services = Depends(get_services),
):
    return {"success": True, **await services.reader.resolve_name(name, network)}


@router.get("/balances/{address}")
async def native_balance(
    address: str,
    network: Optional[str] = Query(None),
    services: Services = Depends(get_services),
):
    """Native balance of an address or name."""
    return {"success": True, **await services.reader.get_balance(address, network)}


@router.get("/balances/{address}/tokens/{token_address}")
async def token_balance(
    address: str,
    token_address: str,
    network: Optional[str] = Query(None),
    services: Services = Depends(get_services),
):
    """ERC20 balance of an address or name."""
    return {"success": True, **await services.reader.get_token_balance(token_address, address, network)}


@router.get("/blocks/latest")
async def latest_block(
    network: Optional[str] = Query(None),
    services: Services = Depends(get_services),
):
    """Most recent block."""
    return {"success": True, "block": await services.reader.get_latest_block(network)}


@router.get("/blocks/{block}")
async def get_block(
    block: str,
    network: Optional[str] = Query(None),
    services: Services = Depends(get_services),
):
    """Block by number or tag ("latest", "finalized", ...)."""
    return {"success": True, "block": await services.reader.get_block(block, network)}


@router.get("/transactions/{tx_hash}")
async def get_transaction(
    tx_hash: str,
    network: Optional[str] = Query(None),
    services: Services = Depends(get_services),
):
    return {"success": True, "transaction": await services.reader.get_transaction(tx_hash, network)}


@router.get("/transactions/{tx_hash}/receipt")
async def get_transaction_receipt(
    tx_hash: str,
    network: Optional[str] = Query(None),
    services: Services = Depends(get_services),
):
    return {"success": True, "receipt": await services.reader.get_transaction_receipt(tx_hash, network)}


@router.post("/contracts/read")
async def read_contract(request: ContractReadRequest, services: Services = Depends(get_services)):
    """Call a view function."""
    result = await services.reader.read_contract(
        request.contract_address,
        request.abi,
        request.function_name,
        request.args,
        request.network,
    )
    return {"success": True, "result": result}
