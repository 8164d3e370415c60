class InvalidRequestError(ValueError):
    """Raised when the caller hands the pipeline arguments it cannot honour.

    Sparse or empty data is never an error; only contract violations such as
    negative result counts or mismatched vector dimensions end up here.
    """
