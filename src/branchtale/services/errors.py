"""Service-layer exceptions."""


class StructuralError(Exception):
    """Raised when level content is malformed or incomplete at runtime."""


class InputExhaustedError(Exception):
    """Raised when the player's input stream closes before a decision."""
