"""Keyword suggestion prompt."""

KEYWORD_EXTRACTOR_V1 = """Extract the most important keywords from this text for video content creation.

RULES
• One keyword or short phrase per line.
• Concrete, searchable subjects (places, objects, scenery, actions).
• At most {max_keywords} lines.
• No numbering, no explanations, no surrounding text.

TEXT ↓
<<<
{description}
>>>"""
