"""
Exceptions raised by the structure inference engine
"""


class LogShapeError(Exception):
    """Base exception for all structure inference errors"""
    pass


class RejectedSampleError(LogShapeError):
    """The sample is not in the format being tried"""
    pass


class MalformedInputError(LogShapeError):
    """The sample could not be parsed for a reason other than truncation"""
    pass


class MixedTypeError(LogShapeError):
    """A field mixes object and non-object values"""
    pass


class InternalInvariantError(LogShapeError):
    """A catalogue pattern behaved inconsistently between selection and use"""
    pass
