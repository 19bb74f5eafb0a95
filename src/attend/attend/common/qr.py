from __future__ import annotations

import io
from typing import Optional

import qrcode

from ..core.constants import EVENT_QR_PREFIX, PERSON_QR_PREFIX


def _strip_prefix(value: Optional[str], prefix: str) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    if value.lower().startswith(prefix):
        value = value[len(prefix):]
    return value or None


def parse_event_qr(value: Optional[str]) -> Optional[str]:
    """Accept either a raw event token or an `attend://event/<token>` payload."""
    return _strip_prefix(value, EVENT_QR_PREFIX)


def parse_person_qr(value: Optional[str]) -> Optional[str]:
    """Accept either a raw check-in code or an `attend://person/<code>` payload."""
    return _strip_prefix(value, PERSON_QR_PREFIX)


def event_qr_payload(event_qr_token: str) -> str:
    return f"{EVENT_QR_PREFIX}{event_qr_token}"


def render_qr_png(data: str) -> io.BytesIO:
    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_L,
        box_size=10,
        border=2,
    )
    qr.add_data(data)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    buf.seek(0)
    return buf
