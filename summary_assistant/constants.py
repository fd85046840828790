"""
Product constants grouped by domain.

Values that operators may want to tune live on ``Settings``; the numbers here
are defaults and fixed catalogue data.
"""


class Models:
    """Model catalogue."""

    DEFAULT_MODEL = "gpt-5.2"

    SUPPORTED_BASE_MODELS = (
        "gpt-5.2",
        "gpt-5.1",
        "gpt-4.1",
        "gpt-4.1-mini",
        "gpt-4.1-nano",
    )

    # GPT-5 cannot be fine-tuned
    FINE_TUNABLE_MODELS = (
        "gpt-4.1",
        "gpt-4.1-mini",
        "gpt-4.1-nano",
    )

    RESPONSES_PREFIX = "gpt-5"
    FINE_TUNED_PREFIX = "ft:"


class Endpoints:
    CHAT_COMPLETIONS = "https://api.openai.com/v1/chat/completions"
    RESPONSES = "https://api.openai.com/v1/responses"


class RequestDefaults:
    """Outbound request parameters."""

    MAX_TOKENS = 2048
    TEMPERATURE = 0.7
    API_TIMEOUT_SECONDS = 30.0
    REASONING_EFFORT = "low"
    TEXT_VERBOSITY = "medium"


class Limits:
    DEFAULT_WORD_LIMIT = 100
    MIN_WORD_LIMIT = 50
    MAX_WORD_LIMIT = 500
    MIN_WORD_COUNT = 100            # Prepared article must have at least this many words
    MAX_RETRY_ATTEMPTS = 3
    MIN_RESPONSE_RATIO = 0.2        # Lower bound of accepted summary length
    RATE_LIMIT_MAX_REQUESTS = 10
    RATE_LIMIT_WINDOW_SECONDS = 60
    EXPORT_TTL_SECONDS = 900


class Fields:
    """Names of the structured content fields on a post."""

    SUMMARY = "summary"
    AI_MARKER = "summary_ai"
    AI_CONTENT = "broadcast_content_ai"
    HUMAN_CONTENT = "broadcast_content"
    IN_BROADCAST = "in_broadcast"
    EDIT_LAST = "edit_last"


class Capabilities:
    EDIT = "edit_posts"
    MANAGE = "manage_options"


class ChangeBuckets:
    """Upper bounds (inclusive) of the audit change-percentage filters."""

    LOW_MAX = 20.0
    MEDIUM_MAX = 50.0


DEFAULT_SYSTEM_PROMPT = (
    "Je bent een eindredacteur voor tekst-tv. Denk eerst: wat is de kernboodschap "
    "van dit artikel? Vat het artikel samen in natuurlijk, vloeiend Nederlands voor "
    "een breed publiek. Schrijf volledige zinnen met een logische opbouw. Focus op "
    "de kernboodschap en de belangrijkste feiten. Gebruik korte, heldere zinnen maar "
    "pas op voor telegramstijl. Gebruik maximaal %d woorden. Schrijf alleen in het "
    "Nederlands en gebruik geen gedachtestreepjes."
)

WORD_LIMIT_PLACEHOLDER = "%d"
