# Manual Video Ingestion
# Logs posted videos that were not picked up by automatic detection

from datetime import datetime
import uuid
from typing import Optional
import logging

from schemas.seeding import ContentStatus, ContentStage, PostedVideo
from core.errors import Result, ValidationError, DuplicateError

logger = logging.getLogger(__name__)


def extract_video_id(link: str, now: Optional[datetime] = None) -> str:
    """
    Pull the platform video id out of a link.

    TikTok style links carry the id after `/video/`, YouTube style links in the
    `v=` query parameter. Anything else gets a generated `manual-<millis>-<suffix>`
    id that is unique per call, so extraction never fails and two links logged
    in the same millisecond never share an id.
    """
    extracted = ""
    if "/video/" in link:
        extracted = link.split("/video/")[1].split("?")[0]
    elif "v=" in link:
        extracted = link.split("v=")[1].split("&")[0]

    if not extracted:
        now = now or datetime.utcnow()
        extracted = f"manual-{int(now.timestamp() * 1000)}-{uuid.uuid4().hex[:8]}"
    return extracted


def is_duplicate(content: ContentStatus, video_id: str, link: str) -> bool:
    # Either key alone is enough to reject
    return any(v.id == video_id or v.link == link for v in content.posted_videos)


def add_manual_video(content: ContentStatus, raw_link: str, now: Optional[datetime] = None) -> Result:
    """
    Append a manually logged video to the content record.

    Returns a Result holding the new ContentStatus, or a DuplicateError when a
    video with the same extracted id or the same link is already logged.
    The input record is left untouched.
    """
    # Stored and compared stripped, so a pasted link with stray whitespace
    # still matches the one already logged
    link = (raw_link or "").strip()
    if not link:
        return Result.failure(ValidationError("Video link is required", field="link"))

    now = now or datetime.utcnow()
    video_id = extract_video_id(link, now)

    if is_duplicate(content, video_id, link):
        logger.warning(f"Rejected duplicate video {video_id} ({link})")
        return Result.failure(DuplicateError(
            "This video has already been logged (Duplicate ID/Link).", field="link"
        ))

    updated = content.model_copy(deep=True)
    first_video = len(updated.posted_videos) == 0
    updated.posted_videos.append(PostedVideo(
        id=video_id,
        link=link,
        date=now.isoformat(),
        is_manual=True,
    ))
    if first_video or updated.status == ContentStage.WAITING_FOR_DRAFT:
        updated.status = ContentStage.LIVE

    return Result.success(updated)
