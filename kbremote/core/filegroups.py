"""KbRemote file group operations.

File groups hold content pushed to devices (under ``localcontent/`` on the
device). Uploads are multipart requests and are therefore not retried on
rate limiting; ``upload_dir`` can pace itself with ``delay``.
"""
from __future__ import annotations
import logging
import os
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .client import KbRemoteClient, partial_update
from .exceptions import KbRemoteError
from .normalize import parse_timestamp

logger = logging.getLogger(__name__)

API_URI = "filegroup"
FILES_URI = "filegroupfile"
DEFAULT_REMOTE_ROOT = "localcontent"


@dataclass
class FileEntry:
    """A file or folder inside a file group."""
    name: str
    path: str
    display: Optional[str] = None
    isdir: bool = False
    size: Optional[int] = None
    mtime: Optional[datetime] = None

    @classmethod
    def from_response(cls, data: Dict[str, Any]) -> "FileEntry":
        last_modified = data.get("lastModified")
        # File listings report modification times in UTC
        if isinstance(last_modified, str):
            last_modified = parse_timestamp(last_modified, assume=timezone.utc)
        return cls(
            name=data.get("fileName"),
            path=data.get("filePath"),
            display=data.get("display"),
            isdir=bool(data.get("isFolder")),
            size=data.get("size"),
            mtime=last_modified,
        )


@dataclass
class FileGroup:
    """A KbRemote file group bound to the client that loaded it."""
    client: KbRemoteClient = field(repr=False, compare=False)
    id: Optional[int]
    name: Optional[str]
    awaiting_deployment: bool = False
    files: Optional[List[FileEntry]] = None

    def __post_init__(self):
        if self.files is not None:
            self.files = sorted(self.files, key=lambda entry: entry.path or "")

    @classmethod
    def from_response(cls, client: KbRemoteClient, data: Dict[str, Any]) -> "FileGroup":
        files = data.get("files")
        if files is not None:
            files = [FileEntry.from_response(f) if isinstance(f, dict) else f for f in files]
        return cls(
            client=client,
            id=data.get("fileGroupID"),
            name=data.get("name"),
            awaiting_deployment=bool(data.get("awaitingDeployment")),
            files=files,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fileGroupID": self.id,
            "name": self.name,
            "awaitingDeployment": self.awaiting_deployment,
            "files": self.files,
        }

    def patch(self, *, name: Optional[str] = None, deploychanges: Optional[bool] = None) -> bool:
        """Rename the group and/or deploy pending changes.

        Returns:
            True if the API reports the group as updated

        Raises:
            CallerError: If neither property is given
        """
        data = partial_update(("name", "deploychanges"), name=name, deploychanges=deploychanges)
        resp = self.client.request("PATCH", f"{API_URI}/{self.id}", body=data)
        return bool(resp and resp.get("updated"))

    def deploy_changes(self) -> bool:
        return self.patch(deploychanges=True)

    def delete_file(self, path: str, remote_root: str = DEFAULT_REMOTE_ROOT) -> bool:
        """Delete ``path`` (relative to ``remote_root``) from the group."""
        remote_path = f"{remote_root}/{path}"
        resp = self.client.request("DELETE", f"{FILES_URI}/{self.id}", body={"path": remote_path})
        return bool(resp) and resp.get("deleted") is True

    def upload_file(
        self,
        path: str,
        remote_directory: Optional[str] = None,
        remote_root: str = DEFAULT_REMOTE_ROOT,
    ) -> bool:
        """Upload one local file into the group.

        Args:
            path: Local file path
            remote_directory: Directory under ``remote_root`` to place the file in
            remote_root: Root directory on the device

        Returns:
            True if the API reports the file as uploaded
        """
        remote_path = os.path.basename(path)
        if remote_directory:
            remote_path = f"{remote_directory}/{remote_path}"
        remote_path = f"{remote_root}/{remote_path}"

        logger.debug("uploading file %s => %s", path, remote_path)
        with open(path, "rb") as fh:
            body = {"filegroupid": self.id, "path": remote_path, "file": fh}
            resp = self.client.request("POST", FILES_URI, body=body, as_json=False)
        return bool(resp) and resp.get("uploaded") is True

    def upload_dir(self, dirpath: str, remote_root: str = DEFAULT_REMOTE_ROOT, delay: float = 0.0) -> bool:
        """Upload a local directory tree into the group.

        The directory itself becomes a folder under ``remote_root``; entries
        are uploaded in name order, ``delay`` seconds apart.

        Raises:
            KbRemoteError: If an upload is not acknowledged
        """
        remote_dir = os.path.basename(os.path.normpath(dirpath))
        for filename in sorted(os.listdir(dirpath)):
            path = os.path.join(dirpath, filename)
            if os.path.isfile(path):
                ok = self.upload_file(path, remote_directory=remote_dir, remote_root=remote_root)
                if delay:
                    time.sleep(delay)
            elif os.path.isdir(path):
                ok = self.upload_dir(path, remote_root=f"{remote_root}/{remote_dir}", delay=delay)
            else:
                continue
            if not ok:
                raise KbRemoteError(f"{path}: upload failed")
        return True


class FileGroupService:
    """Service for managing KbRemote file groups."""

    def __init__(self, client: KbRemoteClient):
        """Initialize file group service.

        Args:
            client: KbRemote client
        """
        self.client = client

    def list_filegroups(self) -> List[FileGroup]:
        groups = self.client.request("GET", API_URI) or []
        return [FileGroup.from_response(self.client, group) for group in groups]

    def get_filegroup(self, group_id: int) -> FileGroup:
        """Load a file group together with its file listing."""
        data = self.client.request("GET", f"{API_URI}/{group_id}")
        files_re = self.client.request("GET", f"{FILES_URI}/{group_id}")
        if files_re and files_re.get("files"):
            data["files"] = [FileEntry.from_response(entry) for entry in files_re["files"]]
        return FileGroup.from_response(self.client, data)

    def create_filegroup(self, name: str) -> FileGroup:
        resp = self.client.request("POST", API_URI, body={"name": name})
        return FileGroup.from_response(self.client, resp["filegroup"])
