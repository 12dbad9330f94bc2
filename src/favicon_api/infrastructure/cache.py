"""Hostname-keyed favicon cache on local disk."""

import asyncio
import fcntl
import hashlib
import hmac
import time
from pathlib import Path

from favicon_api.core.exceptions import CacheIOError
from favicon_api.core.interfaces import ICache
from favicon_api.core.logging import get_logger
from favicon_api.models import Origin

# Entries holding the default icon are retried after half a day
DEFAULT_ICON_EXPIRE = 43200


def content_digest(content: bytes) -> str:
    """MD5 hex digest used to recognise the default icon."""
    return hashlib.md5(content).hexdigest()


class DiskCache(ICache):
    """
    One file per hostname, named ``{host}_{hash}.txt``.

    The hash is an HMAC of the hostname, so file names cannot be guessed
    without the key. File contents are the raw favicon bytes and the file
    modification time is the freshness timestamp. Writes hold an exclusive
    ``flock``; reads take no lock and may observe a write in progress.
    """

    def __init__(self, directory: Path | str, hash_key: str) -> None:
        self.directory = Path(directory)
        self._hash_key = hash_key.encode("utf-8")
        self.logger = get_logger("disk_cache")

    def path_for(self, origin: Origin) -> Path:
        """Cache file path for an origin."""
        host = origin.host.lower()
        digest = hmac.new(self._hash_key, host.encode("utf-8"), hashlib.sha256).hexdigest()
        return self.directory / f"{host}_{digest[8:24]}.txt"

    async def get(self, origin: Origin, default_digest: str, ttl: int) -> bytes | None:
        """Get cached bytes, or None if absent, unreadable or stale."""
        return await asyncio.to_thread(self._read, origin, default_digest, ttl)

    async def set(self, origin: Origin, content: bytes) -> None:
        """Write bytes for an origin under an exclusive lock."""
        await asyncio.to_thread(self._write, origin, content)

    def _read(self, origin: Origin, default_digest: str, ttl: int) -> bytes | None:
        path = self.path_for(origin)
        try:
            data = path.read_bytes()
            mtime = path.stat().st_mtime
        except OSError:
            return None

        # An interrupted or in-progress write can leave an empty file
        if not data:
            self.logger.debug("cache_empty", host=origin.host)
            return None

        is_default = content_digest(data) == default_digest
        expire = DEFAULT_ICON_EXPIRE if is_default else ttl
        age = time.time() - mtime

        if age > expire:
            self.logger.debug(
                "cache_stale",
                host=origin.host,
                age=int(age),
                expire=expire,
                is_default=is_default,
            )
            return None

        self.logger.debug("cache_hit", host=origin.host, size=len(data))
        return data

    def _write(self, origin: Origin, content: bytes) -> None:
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise CacheIOError(
                f"Failed to create cache directory: {e}", path=str(self.directory)
            ) from e

        path = self.path_for(origin)
        try:
            # Append mode so the file is not truncated before the lock is held
            with open(path, "ab") as fh:
                fcntl.flock(fh, fcntl.LOCK_EX)
                try:
                    fh.seek(0)
                    fh.truncate()
                    fh.write(content)
                    fh.flush()
                finally:
                    fcntl.flock(fh, fcntl.LOCK_UN)
        except OSError as e:
            raise CacheIOError(f"Failed to write cache file: {e}", path=str(path)) from e

        self.logger.debug("cache_stored", host=origin.host, size=len(content), path=str(path))
