class InvalidInputError(ValueError):
    """Raised when a segmentation call is rejected before any output is written."""

    def __init__(self, reason):
        super().__init__(reason)
        self.reason = reason
