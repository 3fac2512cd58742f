"""Domain-specific errors for the MiLight bridge."""


class MiLightError(Exception):
    """Base error for the MiLight bridge."""


class MalformedRequestError(MiLightError):
    """Raised when a request body is not the expected JSON object."""


class UnknownDeviceTypeError(MiLightError):
    """Raised when a device type token does not name a radio type."""

    def __init__(self, token: str):
        super().__init__(f'Unknown device type: {token}')
        self.token = token


class InvalidRawFrameError(MiLightError):
    """Raised when a raw frame cannot be sent as given."""
