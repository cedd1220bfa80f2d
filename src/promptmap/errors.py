"""Error taxonomy for a single generate action.

Every error here is terminal for the current request only; the session
stays usable for the next attempt.
"""

from __future__ import annotations


class PromptmapError(Exception):
    """Base class for all user-reportable promptmap failures."""


class ValidationError(PromptmapError):
    """A required input field was empty after trimming. No request is issued."""


class ModelInvocationError(PromptmapError):
    """The model call failed (rejected credential, network or service error)."""


class MalformedResponseError(PromptmapError):
    """The model output does not match the ``{code, mapping}`` schema."""


class GenerationInProgressError(PromptmapError):
    """A generate action was submitted while another one is still in flight."""
