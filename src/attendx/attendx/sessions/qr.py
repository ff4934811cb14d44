from __future__ import annotations

import io

import qrcode


def portal_qr_png(portal_url: str, *, box_size: int = 10, border: int = 2) -> bytes:
    """PNG QR code of the portal link, for projecting in the lecture hall."""
    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_L,
        box_size=box_size,
        border=border,
    )
    qr.add_data(portal_url)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()
