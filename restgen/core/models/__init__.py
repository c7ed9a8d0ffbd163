"""
Domain models — Pydantic types for the generation step.

All models are re-exported here for convenient access:

    from restgen.core.models import GenerationConfig, WorkUnit, Action, Receipt
"""

from restgen.core.models.action import Action, Receipt
from restgen.core.models.generation import (
    ApiItem,
    GenerationConfig,
    GeneratorTool,
    WorkUnit,
)

__all__ = [
    # action.py
    "Action",
    "Receipt",
    # generation.py
    "ApiItem",
    "GenerationConfig",
    "GeneratorTool",
    "WorkUnit",
]
