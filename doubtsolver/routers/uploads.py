"""
Doubt Solver: Image Upload Router
Stores a photo of the question and hands back a URL to attach to /ask-doubt.
Mounted only when image upload is enabled.
"""

import logging
import re
import uuid
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, File, UploadFile

from doubtsolver.config import UPLOAD_DIR
from doubtsolver.errors import ValidationError
from doubtsolver.schemas import UploadOut

logger = logging.getLogger(__name__)
router = APIRouter(tags=["uploads"])

UPLOAD_URL_PREFIX = "/uploads"


def _safe_suffix(filename: str) -> str:
    suffix = Path(filename).suffix.lower()
    return re.sub(r"[^a-z0-9.]", "", suffix)[:10]


@router.post("/upload-image", response_model=UploadOut)
def upload_image(image: Optional[UploadFile] = File(None)):
    if image is None or not image.filename:
        raise ValidationError("Image required")

    name = f"{uuid.uuid4().hex}{_safe_suffix(image.filename)}"
    data = image.file.read()
    (UPLOAD_DIR / name).write_bytes(data)
    logger.info(f"Image stored: {name} ({len(data)} bytes)")

    return UploadOut(image_url=f"{UPLOAD_URL_PREFIX}/{name}")
