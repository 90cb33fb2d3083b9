"""
Image asset attached to every thank-you post.

The default image ships inside the package (assets/image.png). A different
file can be configured with ``asset.path`` in config.yml. Either way the
bytes are read once at startup and shared read-only by all requests.
"""
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

ASSET_DIR = Path(__file__).parent / "assets"
DEFAULT_IMAGE_PATH = ASSET_DIR / "image.png"
UPLOAD_FILENAME = "image.png"


@dataclass(frozen=True)
class MediaAsset:
    """Immutable image bytes plus the file name used in the upload."""
    data: bytes = field(repr=False)
    filename: str = UPLOAD_FILENAME


def load_media_asset(path: Optional[str] = None) -> MediaAsset:
    """Read the image to attach to thank-you posts.

    Args:
        path: Optional override; the bundled image is used when None

    Returns:
        MediaAsset holding the file contents

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is empty
    """
    asset_path = Path(path) if path else DEFAULT_IMAGE_PATH
    data = asset_path.read_bytes()
    if not data:
        raise ValueError(f"Image asset is empty: {asset_path}")

    logger.info(f"Loaded image asset {asset_path} ({len(data)} bytes)")
    return MediaAsset(data=data)
