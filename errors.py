"""
errors.py — Exception types shared by every layer.

    InvalidInput   – bad array / algorithm / record handed to the core
    MalformedStep  – corrupt step met during replay; the tick is aborted
    NotFound       – persistence lookup for an unknown id

All of them are recoverable: the HTTP layer turns them into 4xx
responses and carries on.
"""


class VisualizerError(Exception):
    """Base class for all visualizer errors."""
    status_code = 400


class InvalidInput(VisualizerError):
    """Raised when an array, algorithm name or record fails validation."""
    status_code = 400


class MalformedStep(VisualizerError):
    """Raised when a step record has an unknown tag or out-of-range indices."""
    status_code = 422


class NotFound(VisualizerError):
    """Raised when a saved visualization id does not exist."""
    status_code = 404

    def __init__(self, message: str, id: str = ""):
        super().__init__(message)
        self.id = id
