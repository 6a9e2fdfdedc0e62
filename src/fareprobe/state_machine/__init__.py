"""Per-app automation state machine and its budgets."""

from .automation_machine import AutomationStateMachine, TickOutcome
from .budgets import BudgetPlan, RetryBudget, TickBudget, WallClockBudget

__all__ = [
    "AutomationStateMachine",
    "TickOutcome",
    "BudgetPlan",
    "RetryBudget",
    "TickBudget",
    "WallClockBudget",
]
