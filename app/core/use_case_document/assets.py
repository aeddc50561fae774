"""Loading of images referenced by a form: data URIs or paths under the asset root."""

import base64
import binascii
import io
from pathlib import Path

from PIL import Image, UnidentifiedImageError

# Formats python-docx can embed as pictures
DOCX_IMAGE_FORMATS = frozenset({"PNG", "JPEG", "GIF", "BMP", "TIFF", "WMF"})


class AssetError(Exception):
    """Image reference that cannot be turned into a usable image."""

    def __init__(self, message: str, reference: str | None = None):
        super().__init__(message)
        self.reference = reference


def _short(reference: str) -> str:
    return reference if len(reference) <= 60 else reference[:57] + "..."


def read_image_bytes(reference: str, asset_root: str | Path = ".") -> bytes:
    """
    Resolve an image reference to bytes.

    Data URIs are base64-decoded; anything else is a path relative to asset_root
    (a leading "/" is stripped) that must stay inside asset_root.

    Raises:
        AssetError: If the reference is empty, undecodable, outside asset_root or missing
    """
    if not reference or not reference.strip():
        raise AssetError("Referencia de imagen vacía", reference)

    if reference.startswith("data:"):
        _, _, encoded = reference.partition(",")
        try:
            return base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as e:
            raise AssetError(f"Data URI inválido: {e}", _short(reference)) from e

    root = Path(asset_root).resolve()
    path = (root / reference.lstrip("/")).resolve()
    if not path.is_relative_to(root):
        raise AssetError("La imagen está fuera del directorio de recursos", reference)
    try:
        return path.read_bytes()
    except OSError as e:
        raise AssetError(f"No se pudo leer la imagen {path}: {e}", reference) from e


def _to_png(data: bytes) -> bytes:
    with Image.open(io.BytesIO(data)) as image:
        if image.mode not in ("RGB", "RGBA", "L", "LA", "P"):
            image = image.convert("RGBA")
        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
    return buffer.getvalue()


def load_image(reference: str, asset_root: str | Path = ".") -> io.BytesIO:
    """Image bytes as a stream, in a format Word can embed.

    Formats Word does not read (WEBP and the like) are re-encoded as PNG.

    Raises:
        AssetError: If the bytes cannot be read or are not an image
    """
    data = read_image_bytes(reference, asset_root)
    try:
        with Image.open(io.BytesIO(data)) as image:
            image.verify()
            image_format = image.format
        if image_format not in DOCX_IMAGE_FORMATS:
            data = _to_png(data)
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as e:
        raise AssetError(f"La imagen no es válida: {e}", _short(reference)) from e
    return io.BytesIO(data)
