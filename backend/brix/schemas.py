from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class WebsiteType(str, Enum):
    business = "business"
    portfolio = "portfolio"
    ecommerce = "ecommerce"
    blog = "blog"
    landing = "landing"
    restaurant = "restaurant"
    personal = "personal"


class GenerateRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    prompt: str = Field(..., description="Plain-language description of the website to build")
    website_type: WebsiteType = Field(WebsiteType.business, description="Kind of site to generate")
    color_scheme: Optional[str] = Field(None, description="Optional color preference")
    style: Optional[str] = Field(None, description="Optional visual style, e.g. 'minimal'")
    brand_tone: Optional[str] = Field(None, description="Optional copywriting tone")

    @field_validator("prompt")
    @classmethod
    def _prompt_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("prompt must not be blank")
        return value


class ChatTurn(BaseModel):
    role: str
    content: str


class ChatRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    message: str = Field(..., description="The user's chat message")
    conversation_context: List[ChatTurn] = Field(default_factory=list)


# ---------- SSE events ----------


class SSEEvent(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    type: str
    generation_id: Optional[str] = None

    def to_sse(self) -> str:
        payload = self.model_dump_json(by_alias=True, exclude_none=True)
        return f"data: {payload}\n\n"


class ConnectedEvent(SSEEvent):
    type: Literal["connected"] = "connected"
    client_id: str


class InfoEvent(SSEEvent):
    type: Literal["info"] = "info"
    message: str


class StepEvent(SSEEvent):
    type: Literal["step"] = "step"
    message: str
    percentage: Optional[int] = None


class SiteResult(BaseModel):
    code: str
    content: Dict[str, Any]
    metadata: Dict[str, Any]


class CompletionEvent(SSEEvent):
    type: Literal["completion"] = "completion"
    data: SiteResult


class CompleteEvent(SSEEvent):
    type: Literal["complete"] = "complete"
    code: str
    content: Dict[str, Any]
    metadata: Dict[str, Any]


class ErrorEvent(SSEEvent):
    type: Literal["error"] = "error"
    message: str
    details: Optional[str] = None
    stack: Optional[str] = None
