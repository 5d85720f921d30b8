"""Errors raised by the forecast pipeline."""


class EmptyInputError(ValueError):
    """Bucketizer or aggregator was given zero samples.

    Propagated to the caller; the pipeline never synthesizes a placeholder day.
    """

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"{operation} requires at least one forecast sample")
