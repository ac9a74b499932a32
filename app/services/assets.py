"""저장소 경로 → 공개 URL 변환 및 아바타 대체 이미지"""
from urllib.parse import quote

from app.core.config import settings


def resolve_asset_url(path: str | None) -> str | None:
    """저장된 경로를 공개 URL로 변환 (이미 절대 URL이면 그대로)"""
    if not path:
        return None
    if path.startswith(("http://", "https://")):
        return path
    if not settings.storage_public_url:
        return None
    base = settings.storage_public_url.rstrip("/")
    return f"{base}/storage/v1/object/public/{path.lstrip('/')}"


def placeholder_avatar_url(seed: str | None) -> str:
    """닉네임으로 시드된 대체 아바타 URL"""
    return f"{settings.placeholder_avatar_url}?seed={quote(seed or 'guest')}"


def avatar_url(path: str | None, nickname: str | None) -> str:
    """아바타 URL (설정되지 않았으면 대체 아바타)"""
    return resolve_asset_url(path) or placeholder_avatar_url(nickname)
