"""Age gate bypass for search-engine crawlers."""

from typing import Optional

# Crawlers let through without the age gate so listing pages stay indexable
BOT_USER_AGENTS = (
    "googlebot",
    "bingbot",
    "slurp",
    "duckduckbot",
    "baiduspider",
    "yandexbot",
    "sogou",
    "exabot",
    "facebot",
    "facebookexternalhit",
    "ia_archiver",
    "twitterbot",
    "linkedinbot",
    "pinterest",
    "semrushbot",
    "ahrefsbot",
    "mj12bot",
    "dotbot",
    "petalbot",
)


def is_bot(user_agent: Optional[str]) -> bool:
    """True if the user agent contains a known crawler token (case-insensitive)."""
    if not user_agent:
        return False
    ua = user_agent.lower()
    return any(bot in ua for bot in BOT_USER_AGENTS)


def requires_age_gate(user_agent: Optional[str], verified: bool = False) -> bool:
    """Show the gate unless the visitor already confirmed their age or is a crawler."""
    return not verified and not is_bot(user_agent)
