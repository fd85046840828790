"""User-facing messages for upstream failures."""

from typing import Dict

_STATUS_MESSAGES: Dict[int, str] = {
    400: "Ongeldige aanvraag - check je instellingen",
    401: "API-sleutel klopt niet",
    403: "Geen toegang - check API-rechten",
    404: "AI-model bestaat niet",
    429: "API-limiet bereikt - wacht even",
    500: "OpenAI heeft problemen - probeer later",
    503: "OpenAI offline - probeer later",
}

MISSING_API_KEY_MESSAGE = "API-sleutel niet geconfigureerd"
MISSING_CONFIG_MESSAGE = "Geen API-sleutel - ga naar de instellingen"
INVALID_RESPONSE_MESSAGE = "Ongeldig antwoord van de API"
INVALID_INPUT_MESSAGE = "Ongeldige gegevens - controleer artikel"
RATE_LIMITED_MESSAGE = "Wacht even - max {max_requests} per minuut"
TOO_FEW_WORDS_MESSAGE = "Te weinig woorden. Minimaal {required} vereist, {found} gevonden."


def status_message(status_code: int) -> str:
    return _STATUS_MESSAGES.get(status_code, f"API fout: HTTP {status_code}")


def network_error_message(detail: str) -> str:
    return f"Netwerkfout: {detail}"
