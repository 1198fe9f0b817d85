"""Best-effort detection of bot-protection challenge pages.

The content host sometimes answers API calls with a small HTML document that
decrypts a cookie in JavaScript and reloads the page. Such a response must be
reported as "blocked" rather than as a malformed payload, so callers can show
a distinct message.
"""

from typing import Protocol

SCRIPT_SIGNATURES: tuple[str, ...] = (
    "slowAES.decrypt",
    "/aes.js",
    'document.cookie="__test=',
)

HTML_PREFIXES: tuple[str, ...] = ("<!doctype html", "<html")


class ChallengeDetector(Protocol):
    def detect(self, body_text: str, content_type: str | None) -> str | None:
        """Return the name of the matching rule, or None for a regular response."""
        ...


def is_json_content_type(content_type: str | None) -> bool:
    return bool(content_type) and "application/json" in content_type.lower()


class SignatureChallengeDetector:
    """Fixed rule set: known challenge script signatures, then HTML served as JSON."""

    def __init__(self, signatures: tuple[str, ...] = SCRIPT_SIGNATURES) -> None:
        self.signatures = signatures

    def detect(self, body_text: str, content_type: str | None) -> str | None:
        if any(signature in body_text for signature in self.signatures):
            return "script-signature"

        if is_json_content_type(content_type):
            head = body_text.lstrip()[:32].lower()
            if head.startswith(HTML_PREFIXES):
                return "html-instead-of-json"

        return None
