from .fingerprint import content_fingerprint, has_content_changed
from .parser import (
    CritiqueData,
    CritiqueScore,
    CritiqueSection,
    CritiqueSummary,
    parse_critique,
)
from .scoring import ScoreTier, color_tier, background_tier, width_percent
from .cache import (
    CacheCheck,
    CachedCritique,
    CritiqueCache,
    CritiqueStore,
    JsonFileCritiqueStore,
    MemoryCritiqueStore,
)
from .locate import locate_quote
from .prompts import build_critique_prompt

__all__ = [
    "content_fingerprint", "has_content_changed",
    "CritiqueData", "CritiqueScore", "CritiqueSection", "CritiqueSummary",
    "parse_critique",
    "ScoreTier", "color_tier", "background_tier", "width_percent",
    "CacheCheck", "CachedCritique", "CritiqueCache", "CritiqueStore",
    "JsonFileCritiqueStore", "MemoryCritiqueStore",
    "locate_quote",
    "build_critique_prompt",
]
