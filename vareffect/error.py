class NotSpecifiedError(Exception):
    """
    raised when information is required for a function but has not been given

    for example if strand was required but had been set to STRAND.NS then this
    error would be raised
    """
    pass


class InvalidFrameError(ValueError):
    """
    raised when a frame outside of {-1, 0, 1, 2} is assigned to a marker
    """
    pass


class SerializationError(Exception):
    """
    raised when a genome database record cannot be parsed
    """
    pass
