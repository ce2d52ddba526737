"""Binary <-> text helpers for handing encoded images to storage."""

import base64
import binascii
import re

from .core.errors import TransportError

_DATA_URL = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<payload>.*)$", re.DOTALL)


def to_data_url(data: bytes, mime_type: str) -> str:
    """Format bytes as a base64 data URL.

    Args:
        data: Encoded image bytes
        mime_type: MIME type recorded in the URL, e.g. ``image/webp``

    Returns:
        Data URL in format: data:{mime_type};base64,{data}
    """
    payload = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{payload}"


def from_data_url(url: str) -> tuple[bytes, str]:
    """Parse a base64 data URL back into its bytes and MIME type.

    Raises:
        TransportError: If the string is not a base64 data URL
    """
    match = _DATA_URL.match(url.strip())
    if not match:
        raise TransportError("Not a base64 data URL")

    try:
        data = base64.b64decode(match.group("payload"), validate=True)
    except (binascii.Error, ValueError) as e:
        raise TransportError(f"Invalid base64 payload: {e}") from e
    return data, match.group("mime")
