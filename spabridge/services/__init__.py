"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .plan_bridge import PlanCsvBridge

__all__ = ["PlanCsvBridge"]
