"""
Build-time asset tooling for the pet profile site.

- qrcodes: QR-code renditions plus a printable sheet
- images: down-only resize and WebP re-encoding of raw photos
- validation: pre-deployment checklist for the site project
"""

__version__ = "0.1.0"
