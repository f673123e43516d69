"""Static site publishing for Diaryx documents."""

from .generator import PublishConfig, PublishResult, SiteGenerator

__all__ = ["PublishConfig", "PublishResult", "SiteGenerator"]
