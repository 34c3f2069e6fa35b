"""Chapter review flow: reuse a cached critique or ask a model for a new one."""

from typing import Optional

from pydantic import BaseModel

from .config import Config
from .critique.cache import CritiqueCache
from .critique.fingerprint import content_fingerprint
from .critique.parser import CritiqueData, parse_critique
from .critique.prompts import build_critique_prompt
from .providers import ModelRouter
from .utils.logger import setup_logger

logger = setup_logger()


class ReviewOutcome(BaseModel):
    raw: str
    critique: Optional[CritiqueData] = None
    from_cache: bool = False
    content_changed: bool = False
    fingerprint: str = ""


class ChapterReviewer:
    """Critique chapters, reusing the cached critique while the text is unchanged."""

    def __init__(self, router: ModelRouter, cache: CritiqueCache, config: Config):
        self.router = router
        self.cache = cache
        self.config = config

    def review(
        self,
        chapter_id: str,
        novel_title: str,
        chapter_title: str,
        content: str,
        model: Optional[str] = None,
        force: bool = False,
    ) -> ReviewOutcome:
        if not content or not content.strip():
            raise ValueError("Chapter has no content to review")

        fingerprint = content_fingerprint(content)
        check = self.cache.check(chapter_id, content)

        if check.has_cached and not check.content_changed and not force:
            logger.info(f"Reusing cached critique for chapter {chapter_id}")
            return ReviewOutcome(
                raw=check.critique,
                critique=parse_critique(check.critique),
                from_cache=True,
                content_changed=False,
                fingerprint=fingerprint,
            )

        if check.has_cached:
            reason = "forced" if force else "content changed"
            logger.info(f"Regenerating critique for chapter {chapter_id} ({reason})")

        system, prompt = build_critique_prompt(
            novel_title,
            chapter_title,
            content,
            max_content_chars=self.config.critique.max_content_chars,
        )
        raw = self.router.complete(
            system,
            prompt,
            model or self.config.critique.model,
            temperature=self.config.critique.temperature,
        )

        self.cache.save(chapter_id, raw, content)
        critique = parse_critique(raw)
        if critique is None or critique.is_empty:
            logger.warning(f"Critique for chapter {chapter_id} has no recognisable structure")

        return ReviewOutcome(
            raw=raw,
            critique=critique,
            from_cache=False,
            content_changed=check.content_changed,
            fingerprint=fingerprint,
        )
