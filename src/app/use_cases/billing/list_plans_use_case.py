"""
List Plans Use Case
"""

from typing import List

from src.libs.result import Result, Return
from src.domain.plans import Plan, PlanCatalog


class ListPlansUseCase:
    """Public plan catalog, in display order."""

    def __init__(self, plans: PlanCatalog):
        self.plans = plans

    async def execute(self) -> Result[List[Plan]]:
        return Return.ok(self.plans.all())
