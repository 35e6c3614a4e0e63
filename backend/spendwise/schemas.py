import datetime as dt
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Category(str, Enum):
    food = "Food & Dining"
    transport = "Transport"
    shopping = "Shopping"
    entertainment = "Entertainment"
    health = "Health"
    bills = "Bills & Utilities"
    income = "Income"
    other = "Other"


class TransactionKind(str, Enum):
    expense = "expense"
    income = "income"


class ApiErrorDetail(BaseModel):
    field: str
    message: str


class ApiErrorPayload(BaseModel):
    code: str
    message: str
    details: list[ApiErrorDetail] = Field(default_factory=list)


class ApiErrorResponse(BaseModel):
    error: ApiErrorPayload


class HealthResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")
    status: str


class SuccessResponse(BaseModel):
    success: bool = True


class Transaction(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    id: str = Field(min_length=1, max_length=50)
    title: str = Field(min_length=1, max_length=255)
    amount: float = Field(ge=0)
    date: dt.date
    category: Category
    type: TransactionKind
    description: Optional[str] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("title must not be blank")
        return stripped

    @field_validator("description")
    @classmethod
    def empty_description_is_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None
        return value


class Budget(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    category: Category
    limit: float = Field(ge=0)


class AIInsight(BaseModel):
    summary: str
    recommendations: list[str]
    savingsPotential: str


def new_transaction_id() -> str:
    return uuid4().hex[:12]
