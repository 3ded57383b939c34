"""Service-layer exceptions."""


class NotFoundError(ValueError):
    """A requested row does not exist for the user."""
