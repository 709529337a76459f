import logging
import time
from pathlib import Path
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from taskflow.models.user import User
from taskflow.schemas.user import AvatarUpload
from taskflow.api.deps import get_current_user
from taskflow.core.config import settings

logger = logging.getLogger(__name__)

router = APIRouter()

AVATAR_BUCKET = "profile-images"
PUBLIC_PREFIX = "/storage/v1/object/public"

ACCEPTED_IMAGE_TYPES = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}


def public_url(bucket: str, path: str) -> str:
    return f"{settings.PUBLIC_BASE_URL.rstrip('/')}{PUBLIC_PREFIX}/{bucket}/{path}"


@router.post("/avatar", response_model=AvatarUpload, status_code=status.HTTP_201_CREATED)
async def upload_avatar(
    file: UploadFile = File(...),
    current_user: User = Depends(get_current_user)
):
    if file.content_type not in ACCEPTED_IMAGE_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Please upload a JPG, PNG, or WebP image file."
        )

    content = await file.read(settings.MAX_AVATAR_BYTES + 1)
    if len(content) > settings.MAX_AVATAR_BYTES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="File size must be less than 5MB."
        )

    # The stored name never takes the client filename; StaticFiles picks the
    # served Content-Type from this extension
    ext = ACCEPTED_IMAGE_TYPES[file.content_type]
    path = f"avatars/{current_user.id}-{int(time.time() * 1000)}.{ext}"

    target = Path(settings.STORAGE_DIR) / AVATAR_BUCKET / path
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(content)
    logger.info("Stored avatar for user %s at %s", current_user.id, path)

    return AvatarUpload(path=path, public_url=public_url(AVATAR_BUCKET, path))
