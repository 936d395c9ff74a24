from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, Field

PanelName = Literal["main", "submenu", "form", "allResults"]
NavigationAction = Literal["select_category", "select_method", "back"]


class ClassifyRequest(BaseModel):
    method: str
    # Raw provider payload, exactly as the provider returned it
    rawResponse: Dict[str, Any] = Field(default_factory=dict)


class ClassifyResponse(BaseModel):
    method: str
    outcome: Literal["success", "not_found", "error"]
    statusCode: Optional[int] = None
    reason: str


class BadgeResponse(BaseModel):
    color: Literal["green", "yellow", "red"]
    label: str
    missing: List[str] = Field(default_factory=list)


class NavigationStateModel(BaseModel):
    panel: PanelName = "main"
    activeCategory: Optional[str] = None
    activeMethod: Optional[str] = None


class NavigationRequest(BaseModel):
    orgId: str = ""
    state: NavigationStateModel = Field(default_factory=NavigationStateModel)
    action: NavigationAction
    key: Optional[str] = None


class NavigationResponse(BaseModel):
    state: NavigationStateModel
    # Rows for list panels (main / submenu)
    items: List[Dict[str, Any]] = Field(default_factory=list)
    # Active method config + its result (form panel)
    method: Optional[Dict[str, Any]] = None
    result: Optional[Dict[str, Any]] = None
    # Latest attempt per method (allResults panel)
    results: Dict[str, Dict[str, Any]] = Field(default_factory=dict)


class VerifyRequest(BaseModel):
    orgId: str
    method: str
    inputs: Dict[str, str] = Field(default_factory=dict)
