"""Domain exception hierarchy.

Each exception maps to a specific HTTP status code at the interface layer.
Inner layers raise these; the outermost error-handler translates them.

Cancellation is deliberately absent: ``asyncio.CancelledError`` (and the
``TimeoutError`` raised by a caller's ``asyncio.timeout``) propagate as-is.
"""

from __future__ import annotations


class SpecForgeError(Exception):
    """Base exception for the entire application."""


# ── LLM errors ──────────────────────────────────────────────────────────────


class LlmError(SpecForgeError):
    """Any error originating from an LLM provider."""


class LlmTransportError(LlmError):
    """The network or SDK call itself failed."""


class LlmProtocolError(LlmError):
    """The provider answered with a non-success status or a malformed envelope."""


class EmptyResponseError(LlmError):
    """The provider returned no candidates, choices or parts."""


class UnexpectedResponseError(LlmError):
    """A response part exists but does not carry text."""


class ClientConstructionError(LlmError):
    """The provider SDK client could not be created."""


# ── Configuration errors ────────────────────────────────────────────────────


class UnsupportedProviderError(SpecForgeError):
    """No adapter exists for the requested provider."""


class NoActiveConfigurationError(SpecForgeError):
    """An operation needed the active LLM configuration but none is set."""


class ConnectionTestError(SpecForgeError):
    """A connectivity check against a candidate configuration failed."""
