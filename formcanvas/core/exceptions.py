"""
Core Exceptions

Custom exceptions for the form canvas engine.

Expected drop failures (missing targets, full rows, self-drops) are returned
as ApplyOutcome values and never raised. The exceptions below signal
programmer errors: malformed trees handed to the engine, or a drag session
driven through an impossible transition.
"""


class FormCanvasError(Exception):
    """Base class for all engine errors."""

    def __init__(self, message: str = "Form canvas error"):
        self.message = message
        super().__init__(self.message)


class MalformedTreeError(FormCanvasError):
    """
    Raised when a component tree violates a structural invariant.

    Examples:
    - Two nodes share the same id
    - A row container directly contains another row container
    - A row holds more children than the configured maximum

    Usage:
        validate_tree(tree, policy)
        # Raises MalformedTreeError on the first violation found
    """

    def __init__(self, message: str = "Malformed component tree", node_id: str | None = None):
        self.node_id = node_id
        super().__init__(message)


class InvalidSessionTransitionError(FormCanvasError):
    """
    Raised when a drag session event arrives in a state that cannot handle it.

    For example calling on_drop() on a session that never started dragging.
    """

    def __init__(self, event: str, state: str):
        self.event = event
        self.state = state
        super().__init__(f"Cannot handle '{event}' while drag session is '{state}'")


class NodeNotFoundError(FormCanvasError):
    """Raised when a caller names a node id the canvas does not contain."""

    def __init__(self, node_id: str):
        self.node_id = node_id
        super().__init__(f"Node '{node_id}' not found")
