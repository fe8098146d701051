"""
Exception hierarchy for AtomCascade.

Configuration problems derive from ``ValueError`` so that callers validating
user input can catch them the same way as the config validators' errors.
"""


class AtomCascadeError(Exception):
    """Base class for all AtomCascade errors."""


class ConfigurationError(AtomCascadeError, ValueError):
    """Invalid or unsupported computation setup; the computation is aborted."""


class UnsupportedApproachError(ConfigurationError):
    """The requested cascade approach is not implemented."""


class UnsupportedProcessError(ConfigurationError):
    """The requested atomic process cannot be handled in this context."""


class ConvergenceError(AtomCascadeError):
    """The external structure solver failed to produce a multiplet."""


class AmplitudeError(AtomCascadeError):
    """The external amplitude evaluator failed for a channel."""


class ResourceLimitError(AtomCascadeError):
    """A configured resource bound (e.g. maximum number of blocks) was exceeded."""


class LevelIdentityError(AtomCascadeError):
    """Two levels share a handle but disagree in their quantum numbers."""


class LevelLookupError(AtomCascadeError, LookupError):
    """
    A parent/daughter reference points to a level that is not registered.

    This indicates a defect in the construction of the decay graph and is
    never raised for well-formed cascade data.
    """


class CascadeCycleError(AtomCascadeError):
    """The decay graph contains a level that is reachable from itself."""


class PropagationError(AtomCascadeError):
    """Probability propagation did not reach its fixed point."""
