"""
Local file storage for profile images.
"""
import uuid
from pathlib import Path
from typing import Optional

from onboard.config import settings
from onboard.errors import ValidationFailed
from onboard.logger import get_logger

logger = get_logger(__name__)

ALLOWED_EXTENSIONS = {"png", "jpg", "jpeg", "gif", "webp"}

# URL prefix the API serves MEDIA_ROOT under
MEDIA_URL = "/media"


class AvatarStorage:
    """Stores avatars under ``<root>/avatars/<employee_id>/<uuid>.<ext>``."""

    def __init__(self, root: Optional[Path] = None, base_url: Optional[str] = None):
        self.root = Path(root or settings.MEDIA_ROOT)
        self.base_url = (base_url or settings.PUBLIC_BASE_URL).rstrip("/")

    def save(self, employee_id: str, filename: str, content: bytes) -> str:
        """Write the file and return its public URL."""
        extension = Path(filename or "").suffix.lstrip(".").lower()
        if extension not in ALLOWED_EXTENSIONS:
            raise ValidationFailed(
                "Unsupported image type",
                {"file": f"Allowed types: {', '.join(sorted(ALLOWED_EXTENSIONS))}"},
            )
        if not content:
            raise ValidationFailed("Uploaded file is empty", {"file": "Empty file."})
        if "/" in employee_id or "\\" in employee_id or employee_id in {".", ".."}:
            raise ValidationFailed("Invalid employee ID", {"employee_id": "Invalid value."})

        relative = Path("avatars") / employee_id / f"{uuid.uuid4()}.{extension}"
        target = self.root / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)

        logger.info("Avatar stored", employee_id=employee_id, path=str(relative))
        return f"{self.base_url}{MEDIA_URL}/{relative.as_posix()}"
