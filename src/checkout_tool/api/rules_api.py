"""
Rules API - FastAPI router for inspecting and reloading pricing rules.
"""
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from typing import Optional

from ..engine import Checkout, RulesError
from ..services.rules_service import RulesService
from .errors import to_http
from .state import get_checkout

router = APIRouter(prefix="/api/rules", tags=["rules"])


class RuleResponse(BaseModel):
    """Response model for a rule."""
    sku: str
    unit_price: int
    special_count: Optional[int] = None
    special_price: Optional[int] = None
    description: str


class ReloadResponse(BaseModel):
    success: bool
    rules_count: int
    loaded_at: str


def _rule_response(rule) -> RuleResponse:
    return RuleResponse(
        sku=rule.sku,
        unit_price=rule.unit_price,
        special_count=rule.special_price.count if rule.special_price else None,
        special_price=rule.special_price.price if rule.special_price else None,
        description=rule.describe(),
    )


def get_rules_service(co: Checkout = Depends(get_checkout)) -> RulesService:
    return RulesService(co.store)


# Endpoints

@router.get("", response_model=list[RuleResponse])
def list_rules(service: RulesService = Depends(get_rules_service)):
    """List all loaded pricing rules."""
    return [_rule_response(rule) for rule in service.list_rules()]


@router.get("/stats")
def get_stats(service: RulesService = Depends(get_rules_service)):
    """Get rule statistics."""
    return service.get_stats()


@router.post("/reload", response_model=ReloadResponse)
def reload_rules(co: Checkout = Depends(get_checkout)):
    """Reload the rule file now; failures are reported, not swallowed."""
    try:
        rules = co.refresh_rules()
    except RulesError as e:
        raise to_http(e)
    return ReloadResponse(success=True, rules_count=len(rules), loaded_at=rules.loaded_at.isoformat())


@router.get("/{sku}", response_model=RuleResponse)
def get_rule(sku: str, service: RulesService = Depends(get_rules_service)):
    """Get a single rule by SKU."""
    rule = service.get_rule(sku)
    if not rule:
        raise HTTPException(status_code=404, detail=f"Rule for SKU '{sku}' not found")
    return _rule_response(rule)
