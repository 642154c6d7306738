
class InvalidArgument(ValueError):
    """Raised when a caller passes a value the hashing or search functions can't work with."""
