# models.py - value objects passed between the proxy, the scorer and the page
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

MACHINE_VERIFIED = "machine-verified"
AMBIGUOUS = "ambiguous"
AI_INVISIBLE = "ai-invisible"
ERROR = "error"

Status = Literal["machine-verified", "ambiguous", "ai-invisible"]


class NormalizedResult(BaseModel):
    """The candidate entity a classification was based on."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str = Field(description="Display name, falls back to the query")
    entity_id: Optional[str] = Field(default=None, alias="entityId", description="Knowledge graph @id")
    types: List[str] = Field(default_factory=list, description="Type tags in upstream order")
    description: Optional[str] = None
    url: Optional[str] = None
    result_score: Optional[float] = Field(default=None, alias="resultScore", description="Raw upstream confidence")
    location: Optional[str] = Field(default=None, description="addressLocality when upstream has one")

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class SearchOutcome(BaseModel):
    """What the proxy returns for one completed search."""

    model_config = ConfigDict(frozen=True)

    query: str
    status: Status
    result: Optional[NormalizedResult] = None

    @model_validator(mode="after")
    def check_result_matches_status(self):
        if self.status == AI_INVISIBLE and self.result is not None:
            raise ValueError("ai-invisible outcomes carry no result")
        if self.status != AI_INVISIBLE and self.result is None:
            raise ValueError(f"{self.status} outcomes need a result")
        return self

    def to_payload(self) -> dict:
        payload = {"status": self.status}
        if self.result is not None:
            payload["result"] = self.result.to_payload()
        return payload


class AuditView(BaseModel):
    """Everything the page needs to draw exactly one result panel."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    status: Literal["machine-verified", "ambiguous", "ai-invisible", "error"]
    query: str = ""
    result: Optional[NormalizedResult] = None
    display_score: Optional[int] = Field(default=None, alias="displayScore", ge=0, le=100)
    band: Optional[Literal["high", "medium", "low"]] = None
    error_message: Optional[str] = Field(default=None, alias="errorMessage")
    headline: str = ""
    message: str = ""

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)
