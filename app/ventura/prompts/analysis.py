ANALYSIS_SCHEMA_NAME = "startup_analysis"

ANALYSIS_SCHEMA = {
    "type": "object",
    "properties": {
        "score": {
            "type": "number",
            "description": "A score from 0 to 100 based on investment potential.",
        },
        "companyName": {"type": "string", "description": "Inferred name of the startup."},
        "summary": {"type": "string", "description": "Brief executive summary of the pitch."},
        "pros": {
            "type": "array",
            "items": {"type": "string"},
            "description": "List of key strengths.",
        },
        "cons": {
            "type": "array",
            "items": {"type": "string"},
            "description": "List of potential risks or weaknesses.",
        },
        "metrics": {
            "type": "object",
            "properties": {
                "marketSize": {"type": "string", "description": "Estimated market size assessment."},
                "scalability": {"type": "string", "description": "Assessment of scalability."},
                "innovation": {"type": "string", "description": "Assessment of innovation/moat."},
            },
        },
    },
    "required": ["score", "companyName", "summary", "pros", "cons", "metrics"],
}

SYSTEM_PROMPT = (
    "You are a strict Venture Capital analyst. Return ONLY valid JSON that matches the "
    "declared schema. No markdown. No code fences. No extra text."
)

ANALYST_INSTRUCTIONS = """You are a strict Venture Capital analyst. Analyze the provided startup materials.
These materials may include a video pitch, a PDF report, and/or a text summary.

Evaluate the business model, market opportunity, and team presentation based on ALL provided content.
Return a JSON response with a score (0-100).
If the startup is exceptional, give it > 90. If it has flaws, score appropriately."""

REPORT_TEXT_TEMPLATE = "ADDITIONAL CONTEXT / SUMMARY:\n{report_text}"

REPORT_EXTRACT_TEMPLATE = "REPORT TEXT ({filename}):\n<<<{report_extract}>>>"
