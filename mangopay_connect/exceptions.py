class InvalidArgumentError(ValueError):
    """Required input is missing or not supported."""


class NotFoundError(LookupError):
    """Object is absent in Mangopay or is not of the expected kind."""
