from pydantic import BaseModel, Field
from typing import List, Optional, Dict, Any

class ClassifyRequest(BaseModel):
    message: Optional[str] = None

class ReasonDetail(BaseModel):
    kind: str
    text: str
    params: Dict[str, Any] = Field(default_factory=dict)

class ClassificationResponse(BaseModel):
    status: str = "success"
    isSpam: bool
    confidence: int = Field(ge=0, le=100)
    score: int = Field(ge=0)
    verdict: str  # "spam" or "safe"
    reasons: List[str] = []
    reasonDetails: List[ReasonDetail] = []
    summary: Optional[str] = None

class SampleMessages(BaseModel):
    spam: List[str]
    safe: List[str]

class ErrorResponse(BaseModel):
    status: str = "error"
    detail: str
