from .access_code import AccessCode
from .device_session import DeviceSession

__all__ = ['AccessCode', 'DeviceSession']
