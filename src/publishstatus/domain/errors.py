"""Failures that are allowed to reach the consumer of a report."""

from __future__ import annotations


class PublishStatusError(RuntimeError):
    """Base class for report-level failures."""


class ContextUnavailableError(PublishStatusError):
    """Raised when no page context could be obtained at all."""


class NoCurrentItemError(PublishStatusError):
    """Raised when the context yields no anchor item to report on."""


class FetchFailedError(PublishStatusError):
    """Raised when both endpoints of a fetch cycle failed at the transport level."""
