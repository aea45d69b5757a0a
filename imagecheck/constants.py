"""All magic values live here — no inline literals anywhere else."""

# Inference providers
PROVIDER_CLAUDE = "claude"
PROVIDER_OPENAI = "openai"
PROVIDERS = (PROVIDER_CLAUDE, PROVIDER_OPENAI)

CLAUDE_ANALYSIS_MODEL = "claude-sonnet-4-5-20250929"
OPENAI_ANALYSIS_MODEL = "gpt-4o"
CLAUDE_MAX_TOKENS = 2048

# Wall-clock cap for one remote call (seconds). No automatic retries.
DEFAULT_INFERENCE_TIMEOUT: float = 60.0
SDK_MAX_RETRIES = 0

# Structured-output names declared to the providers
ANALYSIS_TOOL_NAME = "record_image_analysis"
ANALYSIS_TOOL_DESCRIPTION = "Record the forensic analysis of the supplied image."
ANALYSIS_SCHEMA_NAME = "image_analysis"

CLAUDE_MIME_TYPES = frozenset({"image/png", "image/jpeg", "image/webp", "image/gif"})
OPENAI_MIME_TYPES = frozenset({"image/png", "image/jpeg", "image/webp", "image/gif"})

# aiLikelihood + humanLikelihood may drift from 100 by this much before we warn.
LIKELIHOOD_DRIFT_TOLERANCE: float = 5.0
PERCENT_TOTAL: float = 100.0

FORENSIC_PROMPT = (
    "You are an expert digital forensics image analyst specializing in detecting "
    "AI-generated content (e.g., Midjourney, DALL-E, Stable Diffusion).\n"
    "Analyze the provided image for specific visual artifacts that distinguish "
    "AI-generated images from real photography or human artwork.\n"
    "\n"
    "Look for:\n"
    "1. Anatomical inconsistencies (hands, eyes, teeth).\n"
    "2. Unnatural lighting or shadows.\n"
    "3. Strange background blurring or bokeh inconsistencies.\n"
    "4. Text rendering errors (gibberish text).\n"
    '5. Texture repetition or "glossy/plastic" skin look.\n'
    "6. Pixel-level artifacts common in diffusion models.\n"
    "\n"
    "Also, reverse-engineer a likely text prompt that would generate this image. "
    "It should be descriptive, mentioning subject, style, lighting, and composition.\n"
    "\n"
    "Provide a strict JSON response estimating the likelihood of this image being "
    "AI-generated. aiLikelihood and humanLikelihood are percentages that sum to 100."
)

# Log messages
MSG_REQUEST_SENT = "→ %s (%s): %s, %d bytes"
MSG_RESPONSE_OK = "✓ Analysis received (%.1fs)"
MSG_INFERENCE_TIMEOUT = "Inference timeout (%ss)"
MSG_LIKELIHOOD_DRIFT = "Likelihoods sum to %.1f (ai=%.1f, human=%.1f)"
MSG_SUPERSEDED = "Submission %d superseded by %d"
MSG_STARTING = "Starting imagecheck…"
MSG_BOT_STARTING = "Starting Telegram bot…"
MSG_BLOCKED_CHAT = "Blocked update from chat_id: %s"
MSG_SEND_OK = "✓ Sent (%.1fs)"
MSG_SEND_FAIL = "✗ Send failed (%.1fs)"

# Error texts
ERR_EMPTY_PAYLOAD = "No response from AI model"
ERR_EMPTY_IMAGE = "Image is empty"
ERR_UNSUPPORTED_MIME = "Unsupported image type: %s"
ERR_INVALID_JSON = "Response is not valid JSON: %s"
ERR_INVALID_SHAPE = "Response does not match the analysis schema: %s"
ERR_TIMEOUT = "Inference timed out after %ss"

# Presenter
COLOR_AI = "#ef4444"
COLOR_HUMAN = "#3b82f6"
COLOR_UNCERTAIN = "#eab308"
ICON_VERDICT_AI = "shield-alert"
ICON_VERDICT_HUMAN = "shield-check"
ICON_VERDICT_UNCERTAIN = "alert-triangle"
ICON_INDICATOR_NEGATIVE = "x-circle"
ICON_INDICATOR_POSITIVE = "check-circle"
LABEL_AI_SLICE = "AI Probability"
LABEL_HUMAN_SLICE = "Human Probability"
LABEL_AI_SCORE = "AI Score"
LABEL_DETECTION_RESULT = "Detection Result"
LABEL_CONFIDENCE = "Confidence Analysis"
LABEL_ANALYSIS = "Detailed Analysis"
LABEL_INDICATORS = "Key Visual Indicators"
LABEL_TECHNICAL = "Technical Breakdown"
LABEL_PROMPT = "Potential Generation Prompt"
LABEL_PROMPT_NOTE = "Reverse engineered from the image"
TECHNICAL_FIELDS = (
    ("Lighting", "lighting"),
    ("Texture", "texture"),
    ("Composition", "composition"),
    ("Artifacts", "artifacts"),
)

# Text front ends
CHART_BAR_WIDTH = 40
CHART_BAR_CHAR = "█"
INDICATOR_MARK_NEGATIVE = "✗"
INDICATOR_MARK_POSITIVE = "✓"

# User-facing replies
MSG_ANALYSIS_FAILED = "Analysis failed — the model response could not be read."
MSG_INFERENCE_FAILED = "Could not reach the analysis model — please try again."
MSG_UNSUPPORTED_IMAGE = "Unsupported image — send a PNG, JPEG, WEBP or GIF."
MSG_NO_INDICATORS = "No specific indicators reported."

CMD_STATUS = "status"
CMD_HELP = "help"
TELEGRAM_TYPING_INTERVAL: float = 4.0
TELEGRAM_PHOTO_MIME = "image/jpeg"
TELEGRAM_MAX_MESSAGE = 4096
MSG_STATUS = (
    "Status\n"
    "  Provider : %s\n"
    "  Model    : %s\n"
    "  Timeout  : %ss\n"
)
MSG_HELP = (
    "imagecheck — is this image AI-generated?\n"
    "\n"
    "Send a photo (or an image as a file) and get back:\n"
    "  • a verdict: LIKELY AI / LIKELY HUMAN / UNCERTAIN\n"
    "  • the AI vs. human probability split\n"
    "  • the visual indicators behind the verdict\n"
    "  • a technical breakdown and a reverse-engineered prompt\n"
    "\n"
    "Commands:\n"
    "  /help    — show this message\n"
    "  /status  — current provider and model\n"
    "\n"
    "Sending a new image while one is being analyzed cancels the older one.\n"
)
