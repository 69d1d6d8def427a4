"""Chat channel implementations."""

from kitt.channels.line import LineApiError, LineClient, parse_events, verify_signature

__all__ = ["LineApiError", "LineClient", "parse_events", "verify_signature"]
