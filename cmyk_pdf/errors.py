class ConverterError(Exception):
    """Base class for failures that end a conversion request."""

    status_code = 500

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class UploadMissing(ConverterError):
    status_code = 400


class UploadTooLarge(ConverterError):
    status_code = 413


class ConversionError(ConverterError):
    pass


class PlanningError(ConverterError):
    pass


class ExtractionError(ConverterError):
    pass


class SerializationError(ConverterError):
    pass
