"""Client for the Late social posting API."""

from .late_client import (
    CreatedPost,
    LateClient,
    PlatformTarget,
    PostPayload,
    create_post_with_retry,
    upload_media_with_retry,
    verify_post_with_retry,
)

__all__ = [
    "CreatedPost",
    "LateClient",
    "PlatformTarget",
    "PostPayload",
    "create_post_with_retry",
    "upload_media_with_retry",
    "verify_post_with_retry",
]
