import pytest


def make_payload(**overrides) -> dict:
    """A reply that matches RESPONSE_SCHEMA exactly."""
    payload = {
        "aiLikelihood": 87,
        "humanLikelihood": 13,
        "verdict": "LIKELY_AI",
        "confidenceScore": 91,
        "indicators": ["Asymmetrical eyes", "Gibberish text on sign"],
        "analysis": "The skin has a waxy sheen and the background text is unreadable.",
        "potentialPrompt": "Cinematic portrait of a woman in neon rain, 85mm, bokeh",
        "technicalDetails": {
            "lighting": "Rim light without a visible source",
            "texture": "Plastic-smooth skin",
            "composition": "Centered subject, shallow depth of field",
            "artifacts": "Melted jewelry near the collar",
        },
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def payload() -> dict:
    return make_payload()
