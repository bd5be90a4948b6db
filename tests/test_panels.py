import pytest

from app.ventura.models import BoardScenario, CommitteeMessage, TermSheet
from app.ventura.panels import (
    COMMITTEE_AGENTS,
    BoardSimulatorPanel,
    CommitteeRoomPanel,
    DealSuccessPanel,
    is_settled,
)


class Recorder:
    def __init__(self):
        self.calls = []

    def __call__(self, name):
        return lambda: self.calls.append(name)


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def scenario():
    return BoardScenario.model_validate(
        {
            "id": "scenario_1",
            "title": "Key Engineer Poached",
            "description": "Your CTO left for a competitor.",
            "timeJump": "18 Months Later",
            "choices": [
                {"id": "A", "label": "Promote from within", "consequence": "Morale rises, velocity dips"},
                {"id": "B", "label": "Hire an outside star", "consequence": "Culture clash"},
            ],
        }
    )


class TestBoardSimulatorPanel:
    def test_initial_render(self, scenario, recorder):
        view = BoardSimulatorPanel(scenario, recorder("restart")).render()
        assert view["heading"] == "Board Meeting Simulator"
        assert view["timeJump"] == "18 Months Later"
        assert view["showRestart"] is False
        assert [c["badge"] for c in view["choices"]] == ["Option A", "Option B"]
        assert all(c["consequence"] is None and not c["disabled"] for c in view["choices"])

    def test_choice_reveals_consequence_and_locks_other_options(self, scenario, recorder):
        panel = BoardSimulatorPanel(scenario, recorder("restart"))
        chosen = panel.choose("B")
        assert chosen.label == "Hire an outside star"
        assert panel.choose("A") is None
        assert panel.selected_choice_id == "B"

        a, b = panel.render()["choices"]
        assert a["dimmed"] and a["disabled"] and a["consequence"] is None
        assert b["selected"] and b["consequence"] == "Culture clash"
        assert panel.render()["showRestart"] is True

    def test_unknown_choice(self, scenario, recorder):
        with pytest.raises(KeyError):
            BoardSimulatorPanel(scenario, recorder("restart")).choose("Z")

    def test_restart_only_after_a_choice(self, scenario, recorder):
        panel = BoardSimulatorPanel(scenario, recorder("restart"))
        assert panel.restart() is False
        panel.choose("A")
        assert panel.restart() is True
        assert recorder.calls == ["restart"]


class TestCommitteeRoomPanel:
    @pytest.fixture
    def messages(self):
        return [
            CommitteeMessage(id="1", agent_id="tech", text="Is it just a wrapper?"),
            CommitteeMessage(id="2", agent_id="risk", text="Burn is 400k a month."),
            CommitteeMessage(id="3", agent_id="vision", text="This could be huge."),
        ]

    def test_reveals_one_message_at_a_time(self, messages, recorder):
        panel = CommitteeRoomPanel(messages, recorder("proceed"), recorder("reject"))
        assert panel.is_debating
        assert panel.reveal_next().id == "1"
        view = panel.render()
        assert [m["agentName"] for m in view["messages"]] == ["Tanya (CTO)"]
        assert view["deliberating"] is True
        assert view["actions"] == []

    def test_voting_opens_after_last_message(self, messages, recorder):
        panel = CommitteeRoomPanel(messages, recorder("proceed"), recorder("reject"))
        assert panel.proceed() is False
        for _ in messages:
            assert panel.reveal_next() is not None
        assert not panel.has_voted
        assert panel.reveal_next() is None
        assert panel.has_voted and not panel.is_debating

        view = panel.render()
        assert [a["label"] for a in view["actions"]] == ["Proceed to Negotiation", "Walk Away"]
        assert panel.proceed() is True
        assert panel.reject() is True
        assert recorder.calls == ["proceed", "reject"]

    def test_message_styles(self, messages, recorder):
        panel = CommitteeRoomPanel(messages, recorder("proceed"), recorder("reject"))
        panel.reveal_all()
        rendered = panel.render()["messages"]
        assert [m["align"] for m in rendered] == ["left", "left", "right"]
        assert [m["tone"] for m in rendered] == ["indigo", "amber", "purple"]
        assert rendered[2]["avatar"] == "🚀"

    def test_empty_debate_goes_straight_to_vote(self, recorder):
        panel = CommitteeRoomPanel([], recorder("proceed"), recorder("reject"))
        assert panel.reveal_next() is None
        assert panel.has_voted

    def test_roster_lists_all_three_partners(self, recorder):
        agents = CommitteeRoomPanel([], recorder("proceed"), recorder("reject")).render()["agents"]
        assert [a["id"] for a in agents] == ["tech", "risk", "vision"]
        assert len(COMMITTEE_AGENTS) == 3


class TestDealSuccessPanel:
    @pytest.fixture
    def term_sheet(self):
        return TermSheet.model_validate(
            {
                "dealCompleted": True,
                "investmentAmount": "$2M",
                "valuation": "$10M",
                "equityPercentage": "20%",
                "useOfFunds": {"product": "50%", "hiring": "30%"},
                "terms": {"boardSeats": "1 seat", "liquidationPreference": "To be determined"},
                "nextSteps": ["Sign LOI", " "],
            }
        )

    def test_render_hides_undetermined_values(self, term_sheet, recorder):
        panel = DealSuccessPanel(term_sheet, "Acme", recorder("full"), recorder("board"), recorder("close"))
        view = panel.render()
        assert view["subheading"].endswith("negotiated with Acme")
        assert [h["value"] for h in view["highlights"]] == ["$2M", "$10M", "20%"]
        assert view["useOfFunds"] == [
            {"key": "product", "label": "Product", "value": "50%"},
            {"key": "hiring", "label": "Hiring", "value": "30%"},
        ]
        assert view["keyTerms"] == [{"key": "boardSeats", "label": "Board Seats", "value": "1 seat"}]
        assert view["nextSteps"] == ["Sign LOI"]

    def test_buttons_forward_to_callbacks(self, term_sheet, recorder):
        panel = DealSuccessPanel(term_sheet, "Acme", recorder("full"), recorder("board"), recorder("close"))
        panel.view_full_term_sheet()
        panel.proceed_to_board_sim()
        panel.close()
        assert recorder.calls == ["full", "board", "close"]


def test_is_settled():
    assert is_settled("$1M")
    assert not is_settled("")
    assert not is_settled(None)
    assert not is_settled("To be determined")
