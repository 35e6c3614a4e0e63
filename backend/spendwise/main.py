import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .persistence import get_persistence
from .schemas import (
    ApiErrorDetail,
    ApiErrorPayload,
    ApiErrorResponse,
    HealthResponse,
    SuccessResponse,
    Transaction,
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="SpendWise API",
    version="0.1.0",
    description="Record store for income and expense transactions.",
)

persistence = get_persistence()


def build_error_response(details: list[ApiErrorDetail], message: str = "Invalid request payload") -> JSONResponse:
    payload = ApiErrorResponse(
        error=ApiErrorPayload(code="VALIDATION_ERROR", message=message, details=details)
    )
    return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content=payload.model_dump())


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details: list[ApiErrorDetail] = []
    for err in exc.errors():
        loc = ".".join(str(item) for item in err.get("loc", []) if item != "body")
        details.append(ApiErrorDetail(field=loc or "body", message=err.get("msg", "validation error")))
    return build_error_response(details)


@app.exception_handler(ValueError)
async def value_error_exception_handler(request: Request, exc: ValueError) -> JSONResponse:
    return build_error_response([ApiErrorDetail(field="body", message=str(exc))])


@app.get("/api/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(status="ok")


@app.get("/api/transactions", response_model=list[Transaction])
async def list_transactions() -> list[Transaction]:
    rows = persistence.list_transactions()
    return [Transaction.model_validate(row) for row in rows]


@app.post("/api/transactions", response_model=SuccessResponse)
async def upsert_transaction(payload: Transaction) -> SuccessResponse:
    persistence.upsert_transaction(payload)
    logger.debug("Upserted transaction %s", payload.id)
    return SuccessResponse()


@app.delete("/api/transactions/{transaction_id:path}", response_model=SuccessResponse)
async def delete_transaction(transaction_id: str) -> SuccessResponse:
    persistence.delete_transaction(transaction_id)
    logger.debug("Deleted transaction %s", transaction_id)
    return SuccessResponse()
