from enum import Enum
from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from .constants import TO_BE_DETERMINED


class Record(BaseModel):
    """Immutable value parsed from a single model response.

    Accepts the service's camelCase keys (or snake_case field names) and
    serialises back to camelCase.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        coerce_numbers_to_str=True,
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data):
        # A null field falls back to its default; required fields still fail.
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class AnalysisMetrics(Record):
    market_size: str = ""
    scalability: str = ""
    innovation: str = ""


class AnalysisResult(Record):
    score: float
    company_name: str
    summary: str
    pros: List[str]
    cons: List[str]
    metrics: AnalysisMetrics

    @field_validator("score")
    @classmethod
    def _clamp_score(cls, value: float) -> float:
        return max(0.0, min(100.0, float(value)))


class ClaimCategory(str, Enum):
    MARKET = "Market"
    FINANCIAL = "Financial"
    TEAM = "Team"
    PRODUCT = "Product"


class DueDiligenceClaim(Record):
    id: str
    claim: str
    category: ClaimCategory
    status: str = "Unverified"
    ai_question: str

    @field_validator("category", mode="before")
    @classmethod
    def _normalize_category(cls, value):
        if isinstance(value, str):
            return value.strip().capitalize()
        return value


class CommitteeAgentId(str, Enum):
    TECH = "tech"
    RISK = "risk"
    VISION = "vision"


class CommitteeAgent(Record):
    id: CommitteeAgentId
    name: str
    role: str
    avatar: str
    personality: str


class CommitteeMessage(Record):
    id: str
    agent_id: CommitteeAgentId
    text: str

    @field_validator("agent_id", mode="before")
    @classmethod
    def _normalize_agent(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value


class BoardChoice(Record):
    id: str
    label: str
    consequence: str = ""


class BoardScenario(Record):
    id: str
    title: str
    description: str
    time_jump: str = ""
    choices: List[BoardChoice]


class UseOfFunds(Record):
    product: str = TO_BE_DETERMINED
    marketing: str = TO_BE_DETERMINED
    hiring: str = TO_BE_DETERMINED
    operations: str = TO_BE_DETERMINED
    other: str = TO_BE_DETERMINED


class DealTerms(Record):
    board_seats: str = TO_BE_DETERMINED
    liquidation_preference: str = TO_BE_DETERMINED
    anti_dilution: str = TO_BE_DETERMINED
    voting_rights: str = TO_BE_DETERMINED
    pro_rata_rights: str = TO_BE_DETERMINED


class Milestones(Record):
    revenue: str = TO_BE_DETERMINED
    profitability: str = TO_BE_DETERMINED
    customer_growth: str = TO_BE_DETERMINED


class TermSheet(Record):
    deal_completed: bool = False
    investment_amount: str = TO_BE_DETERMINED
    valuation: str = TO_BE_DETERMINED
    equity_percentage: str = TO_BE_DETERMINED
    use_of_funds: UseOfFunds = Field(default_factory=UseOfFunds)
    terms: DealTerms = Field(default_factory=DealTerms)
    milestones: Milestones = Field(default_factory=Milestones)
    next_steps: List[str] = Field(default_factory=list)
    notes: str = ""


class ChatMessage(Record):
    role: Literal["user", "model"]
    text: str


class NegotiationProgress(Record):
    should_cancel: bool = False
    show_warning: bool = False
    reason: str = ""


# HTTP request/response bodies.


class Envelope(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class HealthResponse(Envelope):
    status: str
    model: str
    api_key_configured: bool


class NegotiationOpenRequest(Envelope):
    analysis: AnalysisResult


class NegotiationMessageRequest(Envelope):
    analysis: AnalysisResult
    history: List[ChatMessage] = Field(default_factory=list)
    message: str


class NegotiationReply(Envelope):
    reply: str
    history: List[ChatMessage]


class NegotiationTranscriptRequest(Envelope):
    analysis: AnalysisResult
    messages: List[ChatMessage] = Field(default_factory=list)


class DueDiligenceRequest(Envelope):
    analysis: AnalysisResult
    pitch_text: str = ""


class AnalysisRequest(Envelope):
    analysis: AnalysisResult


class TermSheetResponse(Envelope):
    term_sheet: TermSheet
    panel: dict


class BoardResponse(Envelope):
    scenario: BoardScenario
    panel: dict


class CommitteeResponse(Envelope):
    messages: List[CommitteeMessage]
    panel: dict
