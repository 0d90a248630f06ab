#!/usr/bin/env python3
"""
Formatting utilities for lessons.

Renders a lesson as an HTML email body, as plain text for the email's
alternative part and the console, and builds the email subject line.
"""

from html import escape
from typing import List

from .models.lesson import Lesson

EMAIL_STYLE = """
        body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
               line-height: 1.6; color: #333; max-width: 680px; margin: 0 auto; padding: 20px; }
        .meta { color: #666; font-size: 0.9em; }
        .hook { font-size: 1.1em; border-left: 4px solid #4a7bd0; padding-left: 12px; margin: 20px 0; }
        h2 { color: #1f3d7a; margin-top: 28px; }
        .action { background: #f0f6ff; border: 1px solid #c7dcff; border-radius: 5px; padding: 15px; margin: 24px 0; }
        .tag { display: inline-block; background: #eee; border-radius: 3px; padding: 2px 8px; margin: 2px; font-size: 0.85em; }
        .footer { color: #999; font-size: 0.8em; margin-top: 40px; border-top: 1px solid #ddd; padding-top: 10px; }
"""


def format_subject(lesson: Lesson) -> str:
    """Email subject for a lesson."""
    return f"[{lesson.track}] {lesson.title} ({lesson.date.strftime('%b %d, %Y')})"


def _paragraphs(text: str) -> str:
    blocks = [block.strip() for block in text.split("\n\n") if block.strip()]
    return "\n".join(f"<p>{escape(block).replace(chr(10), '<br>')}</p>" for block in blocks)


def format_lesson_html(lesson: Lesson) -> str:
    """
    Render a lesson as a complete HTML document.

    All lesson text is HTML-escaped; the composition API's output is never
    trusted as markup.
    """
    sections_html = "\n".join(
        f"<h2>{escape(section.heading)}</h2>\n{_paragraphs(section.body)}"
        for section in lesson.sections
    )

    action_html = ""
    if lesson.action_item:
        action_html = f'<div class="action"><strong>Try this today:</strong> {escape(lesson.action_item)}</div>'

    tags_html = "".join(f'<span class="tag">#{escape(tag)}</span>' for tag in lesson.tags)

    fallback_note = " &middot; curated content" if lesson.used_fallback else ""

    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <style>{EMAIL_STYLE}    </style>
</head>
<body>
    <p class="meta">{escape(lesson.track)} &middot; {escape(lesson.level)} &middot; {escape(lesson.subtopic)}</p>
    <h1>{escape(lesson.title)}</h1>
    <p class="hook">{escape(lesson.hook)}</p>
{sections_html}
    {action_html}
    <p>{tags_html}</p>
    <p class="footer">{lesson.date.isoformat()} &middot; about {lesson.word_count} words{fallback_note}</p>
</body>
</html>
"""


def format_lesson_text(lesson: Lesson) -> str:
    """Plain-text rendering of a lesson."""
    lines: List[str] = [
        f"{lesson.title}",
        "=" * min(len(lesson.title), 80),
        f"{lesson.track} | {lesson.level} | {lesson.subtopic} | {lesson.date.isoformat()}",
        "",
        lesson.hook,
    ]

    for section in lesson.sections:
        lines.extend(["", f"## {section.heading}", section.body])

    if lesson.action_item:
        lines.extend(["", f"Try this today: {lesson.action_item}"])

    if lesson.tags:
        lines.extend(["", " ".join(f"#{tag}" for tag in lesson.tags)])

    footer = f"{lesson.word_count} words"
    if lesson.used_fallback:
        footer += " (curated content)"
    lines.extend(["", footer])
    return "\n".join(lines) + "\n"
