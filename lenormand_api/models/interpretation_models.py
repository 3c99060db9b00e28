# lenormand_api/models/interpretation_models.py
from typing import Any, Optional

from pydantic import BaseModel


class InterpretationRequest(BaseModel):
    # Missing or non-string values are reported by validate_input, after the rate limiter.
    carta1: Optional[Any] = None
    carta2: Optional[Any] = None
    tempo: Optional[Any] = None
    tema: Optional[Any] = None


class InterpretationResponse(BaseModel):
    interpretacao: str
    requestId: str
    timestamp: str
