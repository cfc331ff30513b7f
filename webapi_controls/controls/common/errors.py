"""Errors raised inside a control run and shown in place of the control."""

from webapi_controls.shared.models import ErrorDetail


class ControlError(Exception):
    """Base error. ``message`` is what the user sees."""

    code = ErrorDetail.Codes.CONFIGURATION_ERROR

    def __init__(self, message: str, status: str | None = None):
        super().__init__(message)
        self.message = message
        self.status = status

    def to_detail(self) -> ErrorDetail:
        return ErrorDetail(code=self.code, message=self.message, status=self.status)


class ConfigurationError(ControlError):
    """Missing or invalid control property."""

    code = ErrorDetail.Codes.CONFIGURATION_ERROR


class TransportError(ControlError):
    """Network, proxy or HTTP status failure."""

    code = ErrorDetail.Codes.TRANSPORT_ERROR


class ParseError(ControlError):
    """Malformed JSON, inline or in a response body."""

    code = ErrorDetail.Codes.PARSE_ERROR


class ShapeError(ControlError):
    """Extracted value has the wrong shape for the display variant."""

    code = ErrorDetail.Codes.SHAPE_ERROR
