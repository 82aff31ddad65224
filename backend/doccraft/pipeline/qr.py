"""QR code rendering for build workspaces."""

from __future__ import annotations

from pathlib import Path

import qrcode


def write_qr_png(data: str, destination: Path) -> Path:
    """Encode `data` as a QR code and save it as a PNG at `destination`."""
    qr = qrcode.QRCode(version=1, box_size=10, border=5)
    qr.add_data(data)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")
    destination.parent.mkdir(parents=True, exist_ok=True)
    img.save(str(destination))
    return destination
