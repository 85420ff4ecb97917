"""Transfer, approval and contract write endpoints."""

from fastapi import APIRouter, Depends

from chainops.api.deps import get_services
from chainops.api.schemas import (
    ApproveRequest,
    ContractWriteRequest,
    MultiTokenTransferRequest,
    NativeTransferRequest,
    NftTransferRequest,
    TokenTransferRequest,
)
from chainops.services.registry import Services

router = APIRouter()


@router.post("/transfers/native")
async def transfer_native(request: NativeTransferRequest, services: Services = Depends(get_services)):
    result = await services.transfers.transfer_native(
        request.signer_ref(), request.to, request.amount, request.network
    )
    return {"success": True, **result.to_dict()}


@router.post("/transfers/erc20")
async def transfer_erc20(request: TokenTransferRequest, services: Services = Depends(get_services)):
    result = await services.transfers.transfer_erc20(
        request.signer_ref(), request.token_address, request.to, request.amount, request.network
    )
    return {"success": True, **result.to_dict()}


@router.post("/approvals/erc20")
async def approve_erc20(request: ApproveRequest, services: Services = Depends(get_services)):
    result = await services.transfers.approve_erc20(
        request.signer_ref(), request.token_address, request.spender, request.amount, request.network
    )
    return {"success": True, **result.to_dict()}


@router.post("/transfers/erc721")
async def transfer_erc721(request: NftTransferRequest, services: Services = Depends(get_services)):
    result = await services.transfers.transfer_erc721(
        request.signer_ref(), request.collection_address, request.to, request.token_id, request.network
    )
    return {"success": True, **result.to_dict()}


@router.post("/transfers/erc1155")
async def transfer_erc1155(request: MultiTokenTransferRequest, services: Services = Depends(get_services)):
    result = await services.transfers.transfer_erc1155(
        request.signer_ref(),
        request.collection_address,
        request.to,
        request.token_id,
        request.amount,
        request.network,
    )
    return {"success": True, **result.to_dict()}


@router.post("/contracts/write")
async def write_contract(request: ContractWriteRequest, services: Services = Depends(get_services)):
    result = await services.transfers.write_contract(
        request.signer_ref(),
        request.contract_address,
        request.abi,
        request.function_name,
        request.args,
        request.network,
        request.value,
    )
    return {"success": True, **result.to_dict()}
