JSON_SYSTEM_PROMPT = "Return ONLY valid JSON. No markdown. No code fences. No extra text."

DUE_DILIGENCE_PROMPT_TEMPLATE = """You are a skeptical Due Diligence Investigator.
Review the following startup pitch summary and analysis.
Extract 3-5 specific, verifiable claims made by the founders (e.g. "We have 50% month-over-month growth", "We are the only solution in the market").

For each claim, flag it as "Unverified" and ask a probing question to verify it.

Startup: {company_name}
Summary: {summary}
Pitch Context: {pitch_context}...

Return a JSON object {"claims": [...]} where each claim has this schema:
{
  "id": "string (unique)",
  "claim": "string (the exact claim)",
  "category": "Market" | "Financial" | "Team" | "Product",
  "status": "Unverified",
  "aiQuestion": "string (your probing question)"
}
"""

COMMITTEE_PROMPT_TEMPLATE = """You are simulating an Investment Committee meeting at a top VC firm.
There are 3 agents discussing the startup "{company_name}".

1. "Tech" (The CTO): Obsessed with stack, scalability, and technical moat. Skeptical of "AI wrappers".
2. "Risk" (The CFO): Obsessed with burn rate, unit economics, and competition. Risk-averse.
3. "Vision" (The Partner): Obsessed with market size, story, and "changing the world". Optimistic.

Generate a short, 3-turn conversation (one comment from each) reacting to this analysis:
Score: {score}
Pros: {pros}
Cons: {cons}

Return a JSON object {"messages": [...]} where each message has this schema:
{
  "id": "string",
  "agentId": "tech" | "risk" | "vision",
  "text": "string (keep it punchy and in-character)"
}
"""

BOARD_PROMPT_TEMPLATE = """You are a Future Scenario Simulator.
The startup "{company_name}" successfully raised funding 18 months ago.
Based on their initial weaknesses: {cons}, generate a critical "Crisis Scenario" that they are likely facing now.

Return a JSON object:
{
  "id": "scenario_1",
  "title": "string (Dramatic title)",
  "description": "string (What happened? e.g. 'Competitor X launched a free version...')",
  "timeJump": "18 Months Later",
  "choices": [
    {
      "id": "A",
      "label": "string (Action A)",
      "consequence": "string (Brief hint of result)"
    },
    {
      "id": "B",
      "label": "string (Action B)",
      "consequence": "string (Brief hint of result)"
    }
  ]
}
"""
