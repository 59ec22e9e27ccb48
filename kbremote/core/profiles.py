"""KbRemote configuration profile operations."""
from __future__ import annotations
from typing import Any, Dict, List

from .client import KbRemoteClient, partial_update


class ProfileService:
    """Service for managing KbRemote configuration profiles."""

    def __init__(self, client: KbRemoteClient):
        """Initialize profile service.

        Args:
            client: KbRemote client
        """
        self.client = client

    def list_profiles(self) -> List[Dict[str, Any]]:
        return self.client.request("GET", "profile") or []

    def get_profile(self, profile_id: int) -> Dict[str, Any]:
        return self.client.request("GET", f"profile/{profile_id}")

    def patch_profile(self, profile_id: int, kioskurl: str) -> Any:
        """Change the kiosk URL of a profile."""
        data = partial_update(("kioskurl",), kioskurl=kioskurl)
        return self.client.request("PATCH", f"profile/{profile_id}", body=data)
