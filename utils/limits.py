from typing import Optional

from config import load_config

UNLIMITED = -1


def _tier_limit(section: str, tier: str, config: Optional[dict] = None) -> int:
    config = config or load_config()
    limits = config.get("limits", {}).get(section, {})
    try:
        return int(limits.get(tier, limits.get("free", 0)))
    except (TypeError, ValueError):
        return 0


def quiz_limit_for_tier(tier: str, config: Optional[dict] = None) -> int:
    """Active quizzes a user on `tier` may hold per subject."""
    return _tier_limit("quizzes_per_subject", tier, config)


def doubt_limit_for_tier(tier: str, config: Optional[dict] = None) -> int:
    """Doubt queries per day for `tier`; UNLIMITED (-1) means no cap."""
    return _tier_limit("doubts_per_day", tier, config)


def limit_reached(used: int, limit: int) -> bool:
    if limit == UNLIMITED or limit < 0:
        return False
    return used >= limit
