"""KbRemote device group operations."""
from __future__ import annotations
from typing import Any, Dict, List

from .client import KbRemoteClient


class DeviceGroupService:
    """Service for managing KbRemote device groups."""

    def __init__(self, client: KbRemoteClient):
        """Initialize device group service.

        Args:
            client: KbRemote client
        """
        self.client = client

    def list_device_groups(self) -> List[Dict[str, Any]]:
        return self.client.request("GET", "devicegroup") or []

    def get_device_group(self, group_id: int) -> Dict[str, Any]:
        return self.client.request("GET", f"devicegroup/{group_id}")

    def create_device_group(
        self,
        name: str,
        profile_id: int,
        create_registration_key: bool = True,
    ) -> Dict[str, Any]:
        """Create a device group bound to a profile.

        Args:
            name: Group name
            profile_id: Profile assigned to the group
            create_registration_key: Also create a registration key for the group

        Returns:
            Normalized response, e.g. ``{"created": True, "id": 7620, "registrationkey": "..."}``
        """
        body = {
            "name": name,
            "profileid": profile_id,
            "createregistrationkey": create_registration_key,
        }
        return self.client.request("POST", "devicegroup", body=body)

    def list_registration_keys(self) -> List[Dict[str, Any]]:
        return self.client.request("GET", "registrationkey") or []
