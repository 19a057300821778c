"""Narration prompt for short videos."""

NARRATION_V1 = """Create a short, engaging narration script for a video about: {description}

The script should be concise and suitable for a 1-2 minute video.
Return only the narration text: no title, no scene directions, no markdown."""
