# pos_backend/api/v1/routes_transactions.py
from typing import List

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from pos_backend.api.errors import error_response
from pos_backend.core.security import CurrentUser, get_current_user
from pos_backend.db.base import get_db
from pos_backend.domain.sales import history, service
from pos_backend.domain.sales.schemas import (
    CompletePending,
    HoldSaleCreate,
    MessageOut,
    PendingTransactionOut,
    TransactionCreate,
    TransactionCreated,
    TransactionOut,
)


router = APIRouter(
    prefix="/api/transactions",
    tags=["transactions"],
    dependencies=[Depends(get_current_user)],
)


@router.post("", response_model=TransactionCreated, status_code=201)
async def create_transaction_endpoint(
    payload: TransactionCreate,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    try:
        transaction_id = await service.complete_sale(db, payload, user.id)
    except Exception as exc:
        return error_response(exc, "Failed to create transaction.")
    return TransactionCreated(message="Transaction created successfully", transaction_id=transaction_id)


@router.get("", response_model=List[TransactionOut])
async def list_transactions_endpoint(db: AsyncSession = Depends(get_db)):
    try:
        return await history.list_completed_transactions(db)
    except Exception as exc:
        return error_response(exc, "Error fetching transactions.")


@router.post("/hold", response_model=TransactionCreated, status_code=201)
async def hold_transaction_endpoint(
    payload: HoldSaleCreate,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    try:
        transaction_id = await service.hold_sale(db, payload, user.id)
    except Exception as exc:
        return error_response(exc, "Failed to hold sale.")
    return TransactionCreated(message="Sale held successfully", transaction_id=transaction_id)


@router.get("/pending", response_model=List[PendingTransactionOut])
async def list_pending_endpoint(db: AsyncSession = Depends(get_db)):
    try:
        return await history.list_pending_transactions(db)
    except Exception as exc:
        return error_response(exc, "Error fetching pending transactions.")


@router.post("/pending/{transaction_id}/complete", response_model=MessageOut)
async def complete_pending_endpoint(
    transaction_id: int,
    payload: CompletePending,
    db: AsyncSession = Depends(get_db),
):
    try:
        await service.complete_pending_transaction(db, transaction_id, payload)
    except Exception as exc:
        return error_response(exc, "Failed to complete sale.")
    return MessageOut(message="Sale completed successfully!")


@router.put("/{transaction_id}/cancel", response_model=MessageOut)
async def cancel_transaction_endpoint(
    transaction_id: int,
    db: AsyncSession = Depends(get_db),
):
    try:
        await service.cancel_transaction(db, transaction_id)
    except Exception as exc:
        return error_response(exc, "Failed to cancel transaction.")
    return MessageOut(message="Transaction cancelled and stock restored successfully.")


@router.delete("/pending/{transaction_id}", response_model=MessageOut)
async def delete_pending_endpoint(
    transaction_id: int,
    db: AsyncSession = Depends(get_db),
):
    try:
        deleted = await service.delete_pending_transaction(db, transaction_id)
    except Exception as exc:
        return error_response(exc, "Error removing pending sale.")
    if not deleted:
        return JSONResponse(status_code=404, content={"message": "Pending sale not found."})
    return MessageOut(message="Pending sale successfully recalled and removed.")
