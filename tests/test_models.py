import pytest
from pydantic import ValidationError

from app.ventura.constants import TO_BE_DETERMINED
from app.ventura.models import (
    AnalysisResult,
    BoardScenario,
    ClaimCategory,
    CommitteeAgentId,
    CommitteeMessage,
    DueDiligenceClaim,
    NegotiationProgress,
    TermSheet,
)


def test_analysis_result_from_camel_case_payload():
    result = AnalysisResult.model_validate(
        {
            "score": 91,
            "companyName": "Nimbus",
            "summary": "Edge compute for drones.",
            "pros": ["Team"],
            "cons": ["Capex"],
            "metrics": {"marketSize": "$12B", "scalability": "High", "innovation": "Novel"},
        }
    )
    assert result.company_name == "Nimbus"
    assert result.metrics.market_size == "$12B"
    assert result.model_dump(by_alias=True)["companyName"] == "Nimbus"


def test_analysis_score_is_clamped():
    payload = {"companyName": "X", "summary": "", "pros": [], "cons": [], "metrics": {}}
    assert AnalysisResult.model_validate({**payload, "score": 140}).score == 100.0
    assert AnalysisResult.model_validate({**payload, "score": -3}).score == 0.0


def test_analysis_requires_all_fields():
    with pytest.raises(ValidationError):
        AnalysisResult.model_validate({"score": 50, "companyName": "X"})


def test_records_are_immutable(analysis):
    with pytest.raises(ValidationError):
        analysis.score = 10


def test_due_diligence_claim_normalizes_category_and_defaults_status():
    claim = DueDiligenceClaim.model_validate(
        {"id": 7, "claim": "50% MoM growth", "category": "financial", "aiQuestion": "Show the cohort data?"}
    )
    assert claim.id == "7"
    assert claim.category is ClaimCategory.FINANCIAL
    assert claim.status == "Unverified"


def test_due_diligence_claim_rejects_unknown_category():
    with pytest.raises(ValidationError):
        DueDiligenceClaim.model_validate({"id": "1", "claim": "c", "category": "Legal", "aiQuestion": "q"})


def test_committee_message_agent_is_case_insensitive():
    message = CommitteeMessage.model_validate({"id": "m1", "agentId": "Risk", "text": "Burn is too high."})
    assert message.agent_id is CommitteeAgentId.RISK


def test_board_scenario_parses_choices():
    scenario = BoardScenario.model_validate(
        {
            "id": "scenario_1",
            "title": "The Price War",
            "description": "A competitor went free.",
            "timeJump": "18 Months Later",
            "choices": [{"id": "A", "label": "Match", "consequence": "Margins collapse"}],
        }
    )
    assert scenario.time_jump == "18 Months Later"
    assert scenario.choices[0].label == "Match"


def test_term_sheet_defaults_to_undetermined():
    sheet = TermSheet.model_validate({"investmentAmount": "$2M", "terms": {"boardSeats": "1 seat"}})
    assert sheet.deal_completed is False
    assert sheet.investment_amount == "$2M"
    assert sheet.valuation == TO_BE_DETERMINED
    assert sheet.terms.board_seats == "1 seat"
    assert sheet.terms.anti_dilution == TO_BE_DETERMINED
    assert sheet.use_of_funds.hiring == TO_BE_DETERMINED
    assert sheet.next_steps == []


def test_negotiation_progress_defaults():
    progress = NegotiationProgress()
    assert progress.model_dump(by_alias=True) == {"shouldCancel": False, "showWarning": False, "reason": ""}


def test_null_fields_fall_back_to_defaults():
    claim = DueDiligenceClaim.model_validate(
        {"id": "c1", "claim": "x", "category": "Market", "status": None, "aiQuestion": "?"}
    )
    assert claim.status == "Unverified"
    progress = NegotiationProgress.model_validate({"showWarning": True, "reason": None})
    assert progress.reason == ""


def test_null_required_field_is_still_rejected():
    with pytest.raises(ValidationError):
        DueDiligenceClaim.model_validate({"id": "c1", "claim": None, "category": "Market", "aiQuestion": "?"})
