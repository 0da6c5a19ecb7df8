"""Unit tests for sensitive data redaction."""

from webbed.bootstrap.logging_setup import redact_sensitive


def test_redact_credential_keywords():
    """Credential-looking values are masked regardless of case."""
    assert redact_sensitive("Authorization: Bearer abc") == "[REDACTED]"
    assert redact_sensitive("token=abc123def456") == "[REDACTED]"
    assert redact_sensitive("API_KEY=secret") == "[REDACTED]"
    assert redact_sensitive("Password: mypass") == "[REDACTED]"
    assert redact_sensitive("client_secret=abc123") == "[REDACTED]"


def test_redact_long_hex_sequences():
    """Long hex strings such as digests are masked."""
    assert redact_sensitive("0123456789abcdef0123456789abcdef") == "[REDACTED]"


def test_no_redaction_for_ordinary_paths():
    """Typical request paths pass through untouched."""
    assert redact_sensitive("/assets/logo.png") == "/assets/logo.png"
    assert redact_sensitive("/docs/index.html") == "/docs/index.html"
    assert redact_sensitive("short_hex=abc123") == "short_hex=abc123"


def test_redact_empty_and_none_values():
    """Falsy values are returned unchanged."""
    assert redact_sensitive("") == ""
    assert redact_sensitive(None) is None
