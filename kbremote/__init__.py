"""KbRemote device-management API client package.

To use the API client and resource services:
    from kbremote.core import KbRemoteClient, DeviceService, FileGroupService

To build a client from environment / Docker secrets:
    from kbremote.config import load_settings
    client = KbRemoteClient.from_settings(load_settings())
"""

__version__ = "0.1.0"
