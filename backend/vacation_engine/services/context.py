"""Per-call evaluation context: the current date and the accrual rule table."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from vacation_engine.config import get_settings
from vacation_engine.models.enums import ContractModel
from vacation_engine.services.dates import local_today


@dataclass(frozen=True)
class AccrualRules:
    """Entitlement table and advisory thresholds."""

    annual_entitlement_days: int = 30
    entitlement_by_model: dict[ContractModel, int] = field(default_factory=dict)
    pj_accumulation_warning_days: int = 30

    def entitlement_for(self, model: ContractModel) -> int:
        return self.entitlement_by_model.get(model, self.annual_entitlement_days)


@dataclass(frozen=True)
class EngineContext:
    """Explicit inputs that would otherwise be ambient: today's date and rule settings."""

    today: date
    rules: AccrualRules = field(default_factory=AccrualRules)
    enforce_vacation_balance: bool = True


def rules_from_settings() -> AccrualRules:
    settings = get_settings()
    return AccrualRules(
        annual_entitlement_days=settings.annual_entitlement_days,
        entitlement_by_model={ContractModel(k): v for k, v in settings.entitlement_by_model.items()},
        pj_accumulation_warning_days=settings.pj_accumulation_warning_days,
    )


def build_context(today: date | None = None) -> EngineContext:
    """Build a context from settings, resolving today in the configured timezone."""
    settings = get_settings()
    return EngineContext(
        today=today or local_today(settings.timezone),
        rules=rules_from_settings(),
        enforce_vacation_balance=settings.enforce_vacation_balance,
    )


def get_engine_context() -> EngineContext:
    """FastAPI dependency for the per-request engine context."""
    return build_context()
