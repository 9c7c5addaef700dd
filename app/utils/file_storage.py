# app/utils/file_storage.py
import logging
import uuid
from pathlib import Path

from app.core.config import UPLOAD_DIR

logger = logging.getLogger(__name__)


class LocalFileStorage:
    """
    Keeps photo bytes on the local filesystem under generated names.
    The database only stores the filename and public URL.
    """

    def __init__(self, root: str | Path):
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def path_for(self, filename: str) -> Path:
        # Generated names never contain separators; reject anything that would escape root
        candidate = (self.root / filename).resolve()
        if candidate.parent != self.root.resolve():
            raise FileNotFoundError(filename)
        return candidate

    def save(self, content: bytes, original_name: str | None = None) -> str:
        ext = Path(original_name or "").suffix.lower()
        filename = f"{uuid.uuid4()}{ext}"
        with open(self.root / filename, "wb") as buffer:
            buffer.write(content)
        return filename

    def exists(self, filename: str) -> bool:
        try:
            return self.path_for(filename).is_file()
        except FileNotFoundError:
            return False

    def delete(self, filename: str) -> bool:
        """
        Best-effort removal. Returns False when the file could not be removed,
        leaving it orphaned on disk.
        """
        try:
            self.path_for(filename).unlink(missing_ok=True)
            return True
        except OSError as e:
            logger.warning("Orphaned photo file %s left on disk: %s", filename, e)
            return False

    @staticmethod
    def url_for(filename: str) -> str:
        return f"/api/photos/{filename}"


_storage: LocalFileStorage | None = None


def get_file_storage() -> LocalFileStorage:
    """
    FastAPI dependency returning the process-wide photo store.
    """
    global _storage
    if _storage is None:
        _storage = LocalFileStorage(UPLOAD_DIR)
    return _storage
