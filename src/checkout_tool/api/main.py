from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from typing import Optional

from ..engine import Checkout, CheckoutError
from ..config.settings import get_settings
from ..utils.logger import setup_logger
from .errors import to_http
from .rules_api import router as rules_router
from .state import get_checkout

settings = get_settings()
setup_logger(settings.log_level, settings.log_dir)

app = FastAPI(
    title="Checkout API",
    description="Scan, remove and total a checkout cart priced from a live rule file",
    version="1.0.0"
)

# Enable CORS for frontend development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include rules reporting API
app.include_router(rules_router)


class ScanRequest(BaseModel):
    sku: str


class TotalResponse(BaseModel):
    total: int
    items: int
    closed: bool


class LineResponse(BaseModel):
    sku: str
    quantity: int
    unit_price: int
    bundles: int
    bundle_count: Optional[int]
    bundle_price: Optional[int]
    remainder: int
    extended_price: int
    warnings: list[str]


class ReceiptResponse(BaseModel):
    total: int
    items: int
    lines: list[LineResponse]
    warnings: list[str]
    rules_loaded_at: Optional[str]
    closed: bool


def _receipt_response(co: Checkout, receipt) -> ReceiptResponse:
    return ReceiptResponse(**receipt.to_dict(), closed=co.closed)


def _total_response(co: Checkout, receipt=None) -> TotalResponse:
    if receipt is None:
        receipt = co.receipt()
    return TotalResponse(total=receipt.total, items=receipt.item_count, closed=co.closed)


@app.get("/")
async def root():
    return {"status": "online", "message": "Checkout API Active"}


@app.get("/cart", response_model=ReceiptResponse)
def get_cart(co: Checkout = Depends(get_checkout)):
    """Itemized receipt for the current cart."""
    try:
        return _receipt_response(co, co.receipt())
    except CheckoutError as e:
        raise to_http(e)


@app.get("/cart/total", response_model=TotalResponse)
def get_total(co: Checkout = Depends(get_checkout)):
    try:
        return _total_response(co)
    except CheckoutError as e:
        raise to_http(e)


@app.post("/cart/scan", response_model=TotalResponse)
def scan_item(req: ScanRequest, co: Checkout = Depends(get_checkout)):
    try:
        return _total_response(co, co.scan(req.sku))
    except CheckoutError as e:
        raise to_http(e)


@app.post("/cart/remove", response_model=TotalResponse)
def remove_item(req: ScanRequest, co: Checkout = Depends(get_checkout)):
    try:
        return _total_response(co, co.remove(req.sku))
    except CheckoutError as e:
        raise to_http(e)


@app.post("/cart/checkout", response_model=ReceiptResponse)
def checkout_cart(co: Checkout = Depends(get_checkout)):
    """Finalize the cart; further scans and removes are rejected."""
    try:
        return _receipt_response(co, co.finalize())
    except CheckoutError as e:
        raise to_http(e)
