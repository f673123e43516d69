"""diaryx-site: static site builder for Diaryx markdown documents."""

__version__ = "0.1.0"
