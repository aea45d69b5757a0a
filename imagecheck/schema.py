"""RESPONSE_SCHEMA — the JSON schema declared to the remote model.

Must stay in step with imagecheck.models.AnalysisResult; tests/test_schema.py
pins the two together. Ranges are described rather than declared because
strict structured-output modes reject numeric bounds; the parser enforces them.
"""
from imagecheck.models import Verdict

TECHNICAL_DETAILS_SCHEMA: dict = {
    "type": "object",
    "properties": {
        "lighting": {"type": "string"},
        "texture": {"type": "string"},
        "composition": {"type": "string"},
        "artifacts": {"type": "string"},
    },
    "required": ["lighting", "texture", "composition", "artifacts"],
    "additionalProperties": False,
}

RESPONSE_SCHEMA: dict = {
    "type": "object",
    "properties": {
        "aiLikelihood": {
            "type": "number",
            "description": "Percentage probability (0-100) that the image is AI generated",
        },
        "humanLikelihood": {
            "type": "number",
            "description": "Percentage probability (0-100) that the image is Human made",
        },
        "verdict": {
            "type": "string",
            "enum": [v.value for v in Verdict],
        },
        "confidenceScore": {
            "type": "number",
            "description": "Overall confidence in the verdict (0-100)",
        },
        "indicators": {
            "type": "array",
            "items": {"type": "string"},
            "description": (
                "List of specific visual cues found "
                "(e.g., 'Asymmetrical eyes', 'Perfect skin texture')"
            ),
        },
        "analysis": {
            "type": "string",
            "description": "A detailed paragraph explaining the reasoning.",
        },
        "potentialPrompt": {
            "type": "string",
            "description": (
                "A reverse-engineered prompt that describes the image in the style "
                "of an AI generator input (e.g., 'Cinematic shot of...')."
            ),
        },
        "technicalDetails": TECHNICAL_DETAILS_SCHEMA,
    },
    "required": [
        "aiLikelihood",
        "humanLikelihood",
        "verdict",
        "confidenceScore",
        "indicators",
        "analysis",
        "potentialPrompt",
        "technicalDetails",
    ],
    "additionalProperties": False,
}
