"""
Exception hierarchy for the frame pipeline.

Fatal errors (startup, precondition) propagate to whoever built or drives the
pipeline. Recoverable errors are caught at the tick boundary and turned into a
TickResult status.
"""


class FacemoodError(Exception):
    """Base class for every pipeline error."""


class StartupError(FacemoodError):
    """A capability (cascade, model, label table) failed to load."""


class ConfigurationError(StartupError):
    """Loaded label table and loaded model disagree on the class count."""


class NotReady(FacemoodError):
    """The face detector was used before it was initialised."""


class PreconditionError(FacemoodError):
    """A stage received input its caller guaranteed it would never send."""


class InferenceError(PreconditionError):
    """Tensor handed to the inference engine has the wrong shape or dtype."""


class TransientInferenceError(FacemoodError):
    """A single inference call failed; the next tick may succeed."""


class FrameUnavailable(FacemoodError):
    """The frame source has no frame right now but is still running."""
