# pos_backend/domain/sales/schemas.py
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from pos_backend.db.models.payments import PaymentMethod


class CartItem(BaseModel):
    id: int = Field(gt=0)
    name: Optional[str] = None
    price: Decimal = Field(ge=0)
    quantity: int = Field(gt=0)


class PaymentIn(BaseModel):
    method: PaymentMethod
    amount: Decimal = Field(gt=0)


class TransactionCreate(BaseModel):
    items: List[CartItem] = []
    payments: List[PaymentIn] = []


class HoldSaleCreate(BaseModel):
    items: List[CartItem] = []
    customer_name: Optional[str] = Field(default=None, alias="customerName")

    class Config:
        populate_by_name = True


class CompletePending(BaseModel):
    payments: List[PaymentIn] = []


class TransactionCreated(BaseModel):
    message: str
    transaction_id: int = Field(serialization_alias="transactionId")


class MessageOut(BaseModel):
    message: str


class PaymentOut(BaseModel):
    method: str
    amount: float


class SoldItemOut(BaseModel):
    id: int
    name: str
    barcode: Optional[str] = None
    quantity: int
    price: float
    cost_price: float = Field(serialization_alias="costPrice")


class PendingItemOut(SoldItemOut):
    stock: Optional[int] = None


class TransactionOut(BaseModel):
    id: int
    total: float
    profit: float
    status: str
    timestamp: datetime
    payments: List[PaymentOut]
    items: List[SoldItemOut]


class PendingTransactionOut(BaseModel):
    id: int
    total: float
    customer_name: Optional[str] = Field(default=None, serialization_alias="customerName")
    status: str
    timestamp: datetime
    items: List[PendingItemOut]
