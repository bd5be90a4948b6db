"""Display-ready view models for the simulator screens.

Each panel takes a fully parsed record, keeps only transient UI toggles and
forwards button presses to callbacks supplied by the caller.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Sequence

from .constants import TO_BE_DETERMINED
from .models import (
    BoardChoice,
    BoardScenario,
    CommitteeAgent,
    CommitteeAgentId,
    CommitteeMessage,
    TermSheet,
)


Callback = Callable[[], None]

COMMITTEE_AGENTS: Dict[CommitteeAgentId, CommitteeAgent] = {
    CommitteeAgentId.TECH: CommitteeAgent(
        id=CommitteeAgentId.TECH,
        name="Tanya (CTO)",
        role="Technical Analyst",
        avatar="👩‍💻",
        personality="Skeptical, focused on scalability and moat.",
    ),
    CommitteeAgentId.RISK: CommitteeAgent(
        id=CommitteeAgentId.RISK,
        name="Roger (CFO)",
        role="Risk Manager",
        avatar="📉",
        personality="Conservative, focused on burn rate and competition.",
    ),
    CommitteeAgentId.VISION: CommitteeAgent(
        id=CommitteeAgentId.VISION,
        name="Victoria (Partner)",
        role="Visionary",
        avatar="🚀",
        personality="Optimistic, focused on market size and narrative.",
    ),
}

AGENT_TONES = {
    CommitteeAgentId.TECH: "indigo",
    CommitteeAgentId.RISK: "amber",
    CommitteeAgentId.VISION: "purple",
}


def is_settled(value: Optional[str]) -> bool:
    return bool(value and value.strip() and value.strip() != TO_BE_DETERMINED)


def _humanize(key: str) -> str:
    words: List[str] = []
    current = ""
    for char in key:
        if char.isupper() and current:
            words.append(current)
            current = char.lower()
        else:
            current += char
    words.append(current)
    return " ".join(words).capitalize()


class BoardSimulatorPanel:
    heading = "Board Meeting Simulator"

    def __init__(self, scenario: BoardScenario, on_restart: Callback) -> None:
        self.scenario = scenario
        self._on_restart = on_restart
        self._choices = {choice.id: choice for choice in scenario.choices}
        self.selected_choice_id: Optional[str] = None
        self.show_consequence = False

    def choose(self, choice_id: str) -> Optional[BoardChoice]:
        """Pick an option; once one is picked every button is disabled."""
        if choice_id not in self._choices:
            raise KeyError(f"Unknown choice: {choice_id}")
        if self.selected_choice_id is not None:
            return None
        self.selected_choice_id = choice_id
        self.show_consequence = True
        return self._choices[choice_id]

    def restart(self) -> bool:
        if not self.show_consequence:
            return False
        self._on_restart()
        return True

    def render(self) -> dict:
        choices = []
        for choice in self.scenario.choices:
            selected = choice.id == self.selected_choice_id
            choices.append(
                {
                    "id": choice.id,
                    "badge": f"Option {choice.id}",
                    "label": choice.label,
                    "selected": selected,
                    "dimmed": self.selected_choice_id is not None and not selected,
                    "disabled": self.selected_choice_id is not None,
                    "consequence": choice.consequence if selected and self.show_consequence else None,
                }
            )
        return {
            "heading": self.heading,
            "timeJump": self.scenario.time_jump,
            "title": self.scenario.title,
            "description": self.scenario.description,
            "choices": choices,
            "showRestart": self.show_consequence,
        }


class CommitteeRoomPanel:
    """Plays back a committee debate one message at a time.

    The caller paces ``reveal_next`` (the web layer uses a fixed interval).
    Voting opens on the first call after the last message has been shown.
    """

    heading = "Investment Committee"
    subheading = "The partners are debating your startup."

    def __init__(
        self,
        messages: Sequence[CommitteeMessage],
        on_proceed: Callback,
        on_reject: Callback,
    ) -> None:
        self._pending: List[CommitteeMessage] = [m for m in messages if m.agent_id in COMMITTEE_AGENTS]
        self._on_proceed = on_proceed
        self._on_reject = on_reject
        self.revealed: List[CommitteeMessage] = []
        self.has_voted = False

    @property
    def is_debating(self) -> bool:
        return not self.has_voted

    def reveal_next(self) -> Optional[CommitteeMessage]:
        if self._pending:
            message = self._pending.pop(0)
            self.revealed.append(message)
            return message
        self.has_voted = True
        return None

    def reveal_all(self) -> None:
        while self.reveal_next() is not None:
            pass

    def proceed(self) -> bool:
        if not self.has_voted:
            return False
        self._on_proceed()
        return True

    def reject(self) -> bool:
        if not self.has_voted:
            return False
        self._on_reject()
        return True

    @staticmethod
    def render_message(message: CommitteeMessage) -> dict:
        agent = COMMITTEE_AGENTS[message.agent_id]
        return {
            "id": message.id,
            "agentId": agent.id.value,
            "agentName": agent.name,
            "avatar": agent.avatar,
            "text": message.text,
            "align": "right" if agent.id == CommitteeAgentId.VISION else "left",
            "tone": AGENT_TONES[agent.id],
        }

    def render(self) -> dict:
        view = {
            "heading": self.heading,
            "subheading": self.subheading,
            "agents": [
                {"id": agent.id.value, "name": agent.name, "role": agent.role, "avatar": agent.avatar}
                for agent in COMMITTEE_AGENTS.values()
            ],
            "messages": [self.render_message(message) for message in self.revealed],
            "deliberating": self.is_debating,
            "actions": [],
        }
        if self.has_voted:
            view["actions"] = [
                {"id": "proceed", "label": "Proceed to Negotiation", "primary": True},
                {"id": "reject", "label": "Walk Away", "primary": False},
            ]
        return view


class DealSuccessPanel:
    heading = "🎉 Deal Closed!"

    def __init__(
        self,
        term_sheet: TermSheet,
        company_name: str,
        on_view_full_term_sheet: Callback,
        on_proceed_to_board_sim: Callback,
        on_close: Callback,
    ) -> None:
        self.term_sheet = term_sheet
        self.company_name = company_name
        self._on_view_full_term_sheet = on_view_full_term_sheet
        self._on_proceed_to_board_sim = on_proceed_to_board_sim
        self._on_close = on_close

    def view_full_term_sheet(self) -> None:
        self._on_view_full_term_sheet()

    def proceed_to_board_sim(self) -> None:
        self._on_proceed_to_board_sim()

    def close(self) -> None:
        self._on_close()

    def _use_of_funds(self) -> List[dict]:
        funds = self.term_sheet.use_of_funds.model_dump(by_alias=True)
        return [
            {"key": key, "label": _humanize(key), "value": value}
            for key, value in funds.items()
            if is_settled(value)
        ]

    def _key_terms(self) -> List[dict]:
        terms = self.term_sheet.terms.model_dump(by_alias=True)
        return [
            {"key": key, "label": _humanize(key).title(), "value": value}
            for key, value in terms.items()
            if is_settled(value)
        ]

    def render(self) -> dict:
        sheet = self.term_sheet
        return {
            "heading": self.heading,
            "subheading": f"Congratulations! You've successfully negotiated with {self.company_name}",
            "highlights": [
                {"label": "Investment", "value": sheet.investment_amount, "tone": "emerald"},
                {"label": "Valuation", "value": sheet.valuation, "tone": "blue"},
                {"label": "Equity", "value": sheet.equity_percentage, "tone": "purple"},
            ],
            "useOfFunds": self._use_of_funds(),
            "keyTerms": self._key_terms(),
            "nextSteps": [step for step in sheet.next_steps if step.strip()],
            "actions": [
                {"id": "view_full_term_sheet", "label": "View Full Term Sheet"},
                {"id": "proceed_to_board_sim", "label": "See What Happens Next"},
                {"id": "close", "label": "Close"},
            ],
        }
