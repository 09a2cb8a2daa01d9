"""Exception hierarchy for ecosym.

Both concrete errors also derive from ValueError so callers that only
know about the built-in type still catch them.
"""


class EcosymError(Exception):
    """Base class for all ecosym errors."""


class InvalidInputError(EcosymError, ValueError):
    """Empty or malformed time sequence passed to a trajectory evaluation."""


class InvalidParameterError(EcosymError, ValueError):
    """Non-numeric or out-of-domain model parameter.

    Raised at construction or assignment time, never deferred to
    evaluation.
    """
