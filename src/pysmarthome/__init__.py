"""pysmarthome - Async Python client and device registry for a smart-home server."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pysmarthome")
except PackageNotFoundError:
    __version__ = "0+local"
from pysmarthome.client import SmartHomeClient
from pysmarthome.config import SmartHomeConfig
from pysmarthome.control import CommandSink, DeviceControls
from pysmarthome.exceptions import (
    RegistryClosedError,
    SmartHomeApiError,
    SmartHomeAuthenticationError,
    SmartHomeConfigError,
    SmartHomeDeviceNotFoundError,
    SmartHomeError,
    SmartHomeSessionExpiredError,
    SmartHomeTransportError,
)
from pysmarthome.models import AuthToken, ControlAck, ControlCommand, Device, DeviceType
from pysmarthome.state import (
    Binding,
    ChangedFields,
    DecodedColor,
    DeviceRegistry,
    DevicesLoaded,
    DeviceUpdated,
    DispatchBus,
    IdentityResolver,
    Subscription,
    decode_color,
)

__all__ = [
    "__version__",
    "AuthToken",
    "Binding",
    "ChangedFields",
    "CommandSink",
    "ControlAck",
    "ControlCommand",
    "DecodedColor",
    "Device",
    "DeviceControls",
    "DeviceRegistry",
    "DeviceType",
    "DeviceUpdated",
    "DevicesLoaded",
    "DispatchBus",
    "IdentityResolver",
    "RegistryClosedError",
    "SmartHomeApiError",
    "SmartHomeAuthenticationError",
    "SmartHomeClient",
    "SmartHomeConfig",
    "SmartHomeConfigError",
    "SmartHomeDeviceNotFoundError",
    "SmartHomeError",
    "SmartHomeSessionExpiredError",
    "SmartHomeTransportError",
    "Subscription",
    "decode_color",
]
