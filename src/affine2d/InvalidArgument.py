class InvalidArgument(ValueError):
    """Argument that cannot be used as a transform, matrix or (x, y) point data."""
