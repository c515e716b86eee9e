"""File-backed key/value storage, one JSON document per key."""

import logging
import os
import re
from pathlib import Path

logger = logging.getLogger(__name__)

_SUFFIX = ".json"
_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class KeyValueStorage:
    """Persist string values under keys in ``root``.

    Writes are atomic: the value lands in a temp file that is fsynced and
    then renamed over the target, so readers never see a partial write.
    """

    def __init__(self, root: Path) -> None:
        self._root = root

    @property
    def root(self) -> Path:
        return self._root

    def _path_for(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self._root / f"{key}{_SUFFIX}"

    def get_item(self, key: str) -> str | None:
        path = self._path_for(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except OSError as exc:
            logger.warning("Failed to read storage key %s: %s", key, exc)
            return None

    def set_item(self, key: str, value: str) -> None:
        path = self._path_for(key)
        self._root.mkdir(parents=True, exist_ok=True)

        temp_path = path.with_suffix(".tmp")
        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                f.write(value)
                f.flush()
                os.fsync(f.fileno())
            temp_path.replace(path)
        except OSError:
            temp_path.unlink(missing_ok=True)
            raise

        path.chmod(0o600)
        logger.debug("Stored key %s (%d bytes)", key, len(value))

    def remove_item(self, key: str) -> None:
        self._path_for(key).unlink(missing_ok=True)

    def keys(self) -> list[str]:
        if not self._root.exists():
            return []
        return sorted(p.stem for p in self._root.glob(f"*{_SUFFIX}"))

    def clear(self) -> None:
        """Remove every stored key."""
        for key in self.keys():
            self.remove_item(key)
        logger.info("Cleared local storage at %s", self._root)
