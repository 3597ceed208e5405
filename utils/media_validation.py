"""Validation helpers for uploaded camera frames and audio clips."""

from typing import Optional

from fastapi import UploadFile

from utils.errors import MissingPayloadError, PayloadTooLargeError


def check_payload(data: Optional[bytes], limit: int, *, kind: str) -> bytes:
    """Return `data` if it is non-empty and within `limit` bytes."""
    if not data:
        raise MissingPayloadError(f"No {kind} provided")
    if len(data) > limit:
        raise PayloadTooLargeError(limit)
    return data


async def read_upload(upload: Optional[UploadFile], limit: int, *, kind: str) -> bytes:
    """Read an uploaded file, refusing to buffer more than `limit` + 1 bytes."""
    if upload is None:
        raise MissingPayloadError(f"No {kind} provided")
    data = await upload.read(limit + 1)
    return check_payload(data, limit, kind=kind)


def parse_audio_level(raw: object, default: int) -> int:
    """Return `raw` as an int, or `default` when it is missing or not numeric."""
    if raw is None or isinstance(raw, bool):
        return default
    if isinstance(raw, int):
        return raw
    try:
        return int(float(str(raw).strip()))
    except (ValueError, OverflowError):
        return default
