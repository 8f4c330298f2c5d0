"""Wellness session drafting and publishing platform."""
