"""Stored wallet endpoints."""

from fastapi import APIRouter, Depends, status

from chainops.api.deps import get_services
from chainops.api.schemas import CreateWalletRequest, DeriveAddressRequest, ImportWalletRequest
from chainops.services.registry import Services

router = APIRouter()


@router.post("/wallets", status_code=status.HTTP_201_CREATED)
async def create_wallet(request: CreateWalletRequest, services: Services = Depends(get_services)):
    """Create a wallet with a new random key."""
    wallet = await services.wallets.create_wallet(request.name)
    return {"success": True, "wallet": wallet.to_dict()}


@router.post("/wallets/import", status_code=status.HTTP_201_CREATED)
async def import_wallet(request: ImportWalletRequest, services: Services = Depends(get_services)):
    """Store an existing private key under a name."""
    wallet = await services.wallets.import_wallet(request.name, request.private_key.get_secret_value())
    return {"success": True, "wallet": wallet.to_dict()}


@router.post("/wallets/address")
async def derive_address(request: DeriveAddressRequest, services: Services = Depends(get_services)):
    """Address for a private key. Nothing is stored."""
    address = services.wallets.address_from_private_key(request.private_key.get_secret_value())
    return {"success": True, "address": address}


@router.get("/wallets")
async def list_wallets(services: Services = Depends(get_services)):
    """List wallets, newest first."""
    wallets = await services.wallets.list_wallets()
    return {"success": True, "wallets": [w.to_dict() for w in wallets]}


@router.get("/wallets/by-address/{address}")
async def get_wallet_by_address(address: str, services: Services = Depends(get_services)):
    wallet = await services.wallets.get_wallet_by_address(address)
    return {"success": True, "wallet": wallet.to_dict()}


@router.get("/wallets/{name}")
async def get_wallet(name: str, services: Services = Depends(get_services)):
    wallet = await services.wallets.get_wallet_by_name(name)
    return {"success": True, "wallet": wallet.to_dict()}
