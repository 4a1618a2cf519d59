"""
Merge helpers turning upstream contracts into response models.

Pure functions; no I/O.
"""

from collections.abc import Iterable

from steam_profile_api import images
from steam_profile_api.contracts import (
    AchievementData,
    AchievementSchemaEntry,
    OwnedGame,
    PlayerSummary,
    StoreDetailResult,
)
from steam_profile_api.models import (
    AchievementImages,
    AchievementRecord,
    AchievementSummary,
    Avatar,
    CurrentGame,
    GameAchievementGroup,
    GameEntry,
    GameImages,
    GamePrice,
    PlaytimeStats,
    PresenceStatus,
    RecentGameEntry,
    RecentGameImages,
    UserProfile,
)

FALLBACK_CURRENCY = "CNY"
UNKNOWN_RELEASE_DATE = "Unknown"


def minutes_to_hours(minutes: int) -> int:
    """Whole hours, rounded down."""
    return minutes // 60


def percentage(part: int, total: int) -> int:
    """
    Integer percentage rounded half up; 0 when there is nothing to count.

    >>> percentage(3, 4)
    75
    >>> percentage(1, 8)
    13
    """
    if total <= 0:
        return 0
    return (part * 200 + total) // (total * 2)


def achievement_targets(recent_ids: Iterable[int], owned_ids: Iterable[int], owned_limit: int) -> list[int]:
    """Recent ids, then the first ``owned_limit`` owned ids, without repeats."""
    owned = list(owned_ids)[:owned_limit]
    return list(dict.fromkeys([*recent_ids, *owned]))


# ---------------------------------------------------------------------------
# User
# ---------------------------------------------------------------------------


def build_avatar(player: PlayerSummary) -> Avatar:
    """CDN avatars from the hash, falling back to the URLs Steam sent."""
    if player.avatarhash:
        return Avatar(
            small=images.avatar_small(player.avatarhash),
            medium=images.avatar_medium(player.avatarhash),
            large=images.avatar_large(player.avatarhash),
        )
    return Avatar(small=player.avatar, medium=player.avatarmedium, large=player.avatarfull)


def build_user_profile(player: PlayerSummary, owned: list[OwnedGame]) -> UserProfile:
    status = PresenceStatus.from_code(player.personastate)

    current_game = None
    if player.current_app_id is not None and player.gameextrainfo:
        current_game = CurrentGame(appid=player.current_app_id, name=player.gameextrainfo)

    return UserProfile(
        steamid=player.steamid,
        username=player.personaname,
        profile_url=player.profileurl,
        avatar=build_avatar(player),
        status=status,
        status_message=status.label,
        country_code=player.loccountrycode,
        current_game=current_game,
        playtime_stats=PlaytimeStats(
            total_forever=minutes_to_hours(sum(g.playtime_forever for g in owned)),
            total_two_weeks=minutes_to_hours(sum(g.playtime_2weeks for g in owned)),
        ),
    )


# ---------------------------------------------------------------------------
# Games
# ---------------------------------------------------------------------------


def build_achievement_summary(data: AchievementData | None) -> AchievementSummary | None:
    """Summary for a game, or None when no unlock data was fetched."""
    if data is None or data.total == 0:
        return None
    return AchievementSummary(
        total=data.total,
        unlocked=data.unlocked,
        percentage=percentage(data.unlocked, data.total),
    )


def build_price(store: StoreDetailResult | None) -> GamePrice:
    detail = store.data if store is not None and store.success else None
    price = detail.price_overview if detail is not None else None

    if price is None:
        is_free = detail is not None and detail.is_free
        return GamePrice(
            amount=0,
            currency=FALLBACK_CURRENCY,
            display_price="Free" if is_free else "N/A",
        )

    if price.final_formatted:
        display = price.final_formatted
    else:
        display = "Free" if price.final == 0 else "N/A"

    return GamePrice(
        amount=price.final,
        currency=price.currency or FALLBACK_CURRENCY,
        display_price=display,
    )


def build_game_entry(game: OwnedGame, summary: AchievementSummary | None) -> GameEntry:
    return GameEntry(
        appid=game.appid,
        name=game.name,
        playtime_forever=minutes_to_hours(game.playtime_forever),
        playtime_two_weeks=minutes_to_hours(game.playtime_2weeks),
        images=GameImages(
            icon=images.game_icon(game.appid, game.img_icon_url),
            header_image=images.game_header(game.appid),
        ),
        achievements=summary,
    )


def build_recent_entry(
    game: OwnedGame,
    store: StoreDetailResult | None,
    summary: AchievementSummary | None,
) -> RecentGameEntry:
    detail = store.data if store is not None and store.success else None

    return RecentGameEntry(
        appid=game.appid,
        name=game.name,
        playtime_forever=minutes_to_hours(game.playtime_forever),
        playtime_two_weeks=minutes_to_hours(game.playtime_2weeks),
        images=RecentGameImages(
            icon=images.game_icon(game.appid, game.img_icon_url),
            logo=images.game_logo(game.appid, game.img_logo_url),
            header_image=images.game_header(game.appid),
            hero_image=images.game_hero(game.appid),
            library_hero_image=images.game_library_hero(game.appid),
        ),
        achievements=summary,
        price=build_price(store),
        release_date=(detail.release_date.date if detail else "") or UNKNOWN_RELEASE_DATE,
        short_description=detail.short_description if detail else "",
    )


# ---------------------------------------------------------------------------
# Achievements
# ---------------------------------------------------------------------------


def join_achievements(app_id: int, data: AchievementData) -> list[AchievementRecord]:
    """
    Pair each player-state entry with its schema definition.

    Entries with no schema match keep the raw API name and get empty
    description and icons; they still count towards the totals.
    """
    schema: dict[str, AchievementSchemaEntry] = {s.name: s for s in data.schema_entries}
    records = []

    for state in data.player_state:
        definition = schema.get(state.apiname)
        if definition is None:
            records.append(
                AchievementRecord(
                    name=state.apiname,
                    description="",
                    unlocked=state.is_unlocked,
                    unlock_time=state.unlocktime,
                    images=AchievementImages(icon="", icon_gray=""),
                )
            )
            continue

        records.append(
            AchievementRecord(
                name=definition.displayName or state.apiname,
                description=definition.description,
                unlocked=state.is_unlocked,
                unlock_time=state.unlocktime,
                images=AchievementImages(
                    icon=images.achievement_icon(app_id, definition.icon),
                    icon_gray=images.achievement_icon_gray(app_id, definition.icongray),
                ),
            )
        )

    return records


def resolve_game_name(app_id: int, *listings: Iterable[OwnedGame]) -> str:
    """First non-empty name for ``app_id`` across ``listings``, in order."""
    for listing in listings:
        for game in listing:
            if game.appid == app_id and game.name:
                return game.name
    return ""


def build_achievement_group(
    app_id: int, game_name: str, data: AchievementData | None
) -> GameAchievementGroup | None:
    """One game's achievements, or None if it has none."""
    if data is None or data.total == 0:
        return None

    return GameAchievementGroup(
        appid=app_id,
        game_name=game_name,
        total=data.total,
        unlocked=data.unlocked,
        percentage=percentage(data.unlocked, data.total),
        items=join_achievements(app_id, data),
    )
