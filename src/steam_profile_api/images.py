"""Steam CDN image URL builders."""

MEDIA_BASE = "https://media.steampowered.com/steamcommunity/public/images/apps"
STORE_CDN_BASE = "https://cdn.cloudflare.steamstatic.com/steam/apps"
AVATAR_BASE = "https://avatars.steamstatic.com"


def game_icon(app_id: int, icon_hash: str) -> str:
    if not icon_hash:
        return ""
    return f"{MEDIA_BASE}/{app_id}/{icon_hash}.jpg"


def game_logo(app_id: int, logo_hash: str) -> str:
    if not logo_hash:
        return ""
    return f"{MEDIA_BASE}/{app_id}/{logo_hash}.png"


def game_header(app_id: int) -> str:
    """460x215 store capsule."""
    return f"{STORE_CDN_BASE}/{app_id}/header.jpg"


def game_hero(app_id: int) -> str:
    return f"{STORE_CDN_BASE}/{app_id}/hero.jpg"


def game_library_hero(app_id: int) -> str:
    return f"{STORE_CDN_BASE}/{app_id}/library_hero.jpg"


def _last_segment(icon: str) -> str:
    """Schema icons arrive as full URLs; keep only the file stem."""
    segment = icon.rstrip("/").rsplit("/", 1)[-1]
    return segment.rsplit(".", 1)[0] if "." in segment else segment


def achievement_icon(app_id: int, icon: str) -> str:
    stem = _last_segment(icon)
    if not stem:
        return ""
    return f"{MEDIA_BASE}/{app_id}/achievements/{stem}.jpg"


def achievement_icon_gray(app_id: int, icon_gray: str) -> str:
    stem = _last_segment(icon_gray)
    if not stem:
        return ""
    return f"{MEDIA_BASE}/{app_id}/achievements/{stem}_bw.jpg"


def avatar_small(avatar_hash: str) -> str:
    return f"{AVATAR_BASE}/{avatar_hash}_small.jpg" if avatar_hash else ""


def avatar_medium(avatar_hash: str) -> str:
    return f"{AVATAR_BASE}/{avatar_hash}_medium.jpg" if avatar_hash else ""


def avatar_large(avatar_hash: str) -> str:
    return f"{AVATAR_BASE}/{avatar_hash}_full.jpg" if avatar_hash else ""
