class AccessGateError(Exception):
    """Base class for errors raised by the access gate service"""


class ConfigurationError(AccessGateError):
    """Startup configuration is missing or malformed. Fatal."""


class DeviceConflictError(AccessGateError):
    """The access code is already bound to another device"""

    def __init__(self, code: str, bound_device_id: str):
        super().__init__("This code is already in use on another device.")
        self.code = code
        self.bound_device_id = bound_device_id


class UpstreamError(AccessGateError):
    """The chat completion API failed or returned an unusable response"""

    def __init__(self, message: str, status_code=None):
        super().__init__(message)
        self.status_code = status_code
