"""Scenario engine: template builder, continuity composer, enhancement and orchestration."""
from .continuity import compose_campaign_input, compose_continuity
from .enhancer import accept_rewrite, enhance, unwrap_markdown
from .generator import generate
from .narrative_builder import SECTION_HEADINGS, build_narrative

__all__ = [
    "SECTION_HEADINGS",
    "accept_rewrite",
    "build_narrative",
    "compose_campaign_input",
    "compose_continuity",
    "enhance",
    "generate",
    "unwrap_markdown",
]
