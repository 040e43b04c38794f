"""Mirror a local directory into an S3 bucket."""

from __future__ import annotations

import hashlib
import logging
import mimetypes
import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable

from ... import metrics
from .models import SyncResult

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 1024 * 1024


@dataclass(frozen=True)
class LocalFile:
    """A file under the directory being mirrored."""

    key: str
    path: Path
    size: int
    mtime: float


@dataclass
class SyncPlan:
    """Keys to upload and delete to make the bucket equal the directory."""

    uploads: list[LocalFile] = field(default_factory=list)
    deletes: list[str] = field(default_factory=list)
    unchanged: int = 0


def scan_directory(root: str | os.PathLike[str]) -> dict[str, LocalFile]:
    """Index every regular file under ``root`` by its S3 key.

    Symlinked files and directories are followed like ``aws s3 sync`` does. A
    link pointing back at one of its own parent directories is skipped.
    """
    root_path = Path(root)
    files: dict[str, LocalFile] = {}
    parents = {str(root_path): {os.path.realpath(root_path)}}

    for dirpath, dirnames, filenames in os.walk(str(root_path), followlinks=True):
        chain = parents.pop(dirpath)
        kept = []
        for name in sorted(dirnames):
            child = os.path.join(dirpath, name)
            real = os.path.realpath(child)
            if real in chain:
                logger.warning(f"Skipping {child}: symlink loop back to {real}")
                continue
            kept.append(name)
            parents[child] = chain | {real}
        dirnames[:] = kept

        for name in sorted(filenames):
            path = Path(dirpath, name)
            # dangling symlinks
            if not path.is_file():
                continue
            stat = path.stat()
            key = path.relative_to(root_path).as_posix()
            files[key] = LocalFile(key=key, path=path, size=stat.st_size, mtime=stat.st_mtime)
    return files


def file_md5(path: Path) -> str:
    digest = hashlib.md5()
    with path.open("rb") as fh:
        for chunk in iter(lambda: fh.read(_CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()


def needs_upload(local: LocalFile, remote: dict[str, Any]) -> bool:
    """Decide whether a local file differs from the remote object.

    Single-part ETags are the object's MD5, so content is compared exactly.
    Multipart ETags are not, so those fall back to size and modification time.
    """
    if local.size != remote.get("Size"):
        return True
    etag = str(remote.get("ETag", "")).strip('"')
    if etag and "-" not in etag:
        return file_md5(local.path) != etag
    last_modified = remote.get("LastModified")
    if isinstance(last_modified, datetime):
        local_modified = datetime.fromtimestamp(local.mtime, tz=timezone.utc)
        return local_modified > last_modified
    return True


def plan_sync(local_files: dict[str, LocalFile], remote_objects: Iterable[dict[str, Any]]) -> SyncPlan:
    """Compute the uploads and deletes for a delete-on-missing sync.

    Args:
        local_files: Output of :func:`scan_directory`
        remote_objects: ``Contents`` entries from ``list_objects_v2``

    Returns:
        Plan with uploads sorted by key and deletes for keys absent locally
    """
    plan = SyncPlan()
    remote_by_key = {obj["Key"]: obj for obj in remote_objects}

    for key, local in sorted(local_files.items()):
        remote = remote_by_key.get(key)
        if remote is None or needs_upload(local, remote):
            plan.uploads.append(local)
        else:
            plan.unchanged += 1

    plan.deletes = sorted(key for key in remote_by_key if key not in local_files)
    return plan


def guess_content_type(key: str) -> str:
    content_type, _ = mimetypes.guess_type(key)
    return content_type or "binary/octet-stream"


def sync_directory(provider: Any, bucket: str, root: str | os.PathLike[str]) -> SyncResult:
    """Make ``bucket`` mirror ``root``, deleting remote objects missing locally.

    Args:
        provider: Object exposing ``list_objects``, ``upload_file`` and ``delete_objects``
        bucket: Target bucket
        root: Local directory

    Returns:
        Keys uploaded and deleted
    """
    local_files = scan_directory(root)
    plan = plan_sync(local_files, provider.list_objects(bucket))
    logger.info(
        f"Sync plan for s3://{bucket}: {len(plan.uploads)} upload(s), "
        f"{len(plan.deletes)} delete(s), {plan.unchanged} unchanged"
    )

    result = SyncResult(unchanged=plan.unchanged)
    for local in plan.uploads:
        provider.upload_file(bucket, local.key, str(local.path), guess_content_type(local.key))
        logger.info(f"upload: {local.path} to s3://{bucket}/{local.key}")
        result.uploaded.append(local.key)
        metrics.objects_synced_total.labels(action="upload").inc()

    if plan.deletes:
        provider.delete_objects(bucket, plan.deletes)
        for key in plan.deletes:
            logger.info(f"delete: s3://{bucket}/{key}")
        result.deleted.extend(plan.deletes)
        metrics.objects_synced_total.labels(action="delete").inc(len(plan.deletes))

    return result
