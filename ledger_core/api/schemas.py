"""
Pydantic schemas for API requests
"""

from pydantic import BaseModel, Field

from ..accounts import AccountType


class OpenAccountRequest(BaseModel):
    customer_name: str
    account_type: str = Field(..., description="Account type (checking, savings)")
    initial_deposit: str = Field("0.00", description="Decimal amount as string")

    def to_account_type(self) -> AccountType:
        return AccountType(self.account_type.lower())


class DepositRequest(BaseModel):
    account_number: str
    amount: str = Field(..., description="Decimal amount as string")


class WithdrawRequest(BaseModel):
    account_number: str
    amount: str = Field(..., description="Decimal amount as string")


class TransferRequest(BaseModel):
    from_account_number: str
    to_account_number: str
    amount: str = Field(..., description="Decimal amount as string")

