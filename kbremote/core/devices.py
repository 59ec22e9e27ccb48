"""KbRemote device operations."""
from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional

from .client import KbRemoteClient, partial_update
from .exceptions import CallerError

logger = logging.getLogger(__name__)

# Codes not listed here are documented by the API but not supported:
#  2 update device info, 6 open WiFi settings, 7 identify device,
#  8/9 (force) download profile, 12 open browser settings,
#  13 open remote support, 14 exit kiosk browser,
#  16-18 clear cookies/forms and reload, 19/20 upload events/session data,
#  21 clear HTML5 web storage
PUSH_ACTIONS: Dict[str, int] = {
    "request_status": 1,
    "restart_app": 3,
    "take_screenshot": 4,
    "reload_url": 5,
    "screen_off": 10,
    "screen_on": 11,
    "clear_cache_reload_url": 15,
    "regain_focus": 23,
}

DEVICE_FIELDS = ("name", "devicegroupid", "updateoverrideurl", "overrideurl")


class DeviceService:
    """Service for managing KbRemote devices."""

    def __init__(self, client: KbRemoteClient):
        """Initialize device service.

        Args:
            client: KbRemote client
        """
        self.client = client

    def list_devices(self) -> List[Dict[str, Any]]:
        """Return every device registered to the account."""
        return self.client.request("GET", "device") or []

    def get_device(self, device_id: int) -> Dict[str, Any]:
        return self.client.request("GET", f"device/{device_id}")

    def patch_device(
        self,
        device_id: int,
        *,
        name: Optional[str] = None,
        devicegroupid: Optional[int] = None,
        updateoverrideurl: Optional[bool] = None,
        overrideurl: Optional[str] = None,
    ) -> Any:
        """Update selected device properties.

        Only the properties that are not None are sent.

        Args:
            device_id: Device ID
            name: New device name
            devicegroupid: Device group to move the device into
            updateoverrideurl: Whether the override URL should be applied
            overrideurl: Kiosk URL overriding the profile's URL

        Raises:
            CallerError: If no property is given
        """
        data = partial_update(
            DEVICE_FIELDS,
            name=name,
            devicegroupid=devicegroupid,
            updateoverrideurl=updateoverrideurl,
            overrideurl=overrideurl,
        )
        logger.info("Patching device %s: %s", device_id, sorted(data))
        return self.client.request("PATCH", f"device/{device_id}", body=data)

    def push(self, device_id: int, action: str) -> Any:
        """Send a push action (see ``PUSH_ACTIONS``) to a device.

        Raises:
            CallerError: If the action is unknown
        """
        code = PUSH_ACTIONS.get(action)
        if code is None:
            raise CallerError(f"{action}: no such action")
        return self.client.request("GET", f"push/{device_id}/{code}")
