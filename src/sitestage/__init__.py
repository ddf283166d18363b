"""Sitestage - one pipeline for live serving and static generation of localized sites."""

__version__ = "0.1.0"
