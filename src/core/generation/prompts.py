#!/usr/bin/env python3
"""
Prompts for micro-lesson composition.

Centralizes the prompt templates sent to the composition API. The model is
asked for a single JSON object matching LESSON_SCHEMA.
"""

from typing import List

from ..models.content import AggregatedContent, Insight


class LessonPrompts:
    """Collection of prompts for lesson composition."""

    # ---------- SYSTEM PROMPT ----------
    SYSTEM_PROMPT = (
        "You are an experienced technical educator who writes short, practical daily lessons "
        "for working engineers. Each lesson should take about five minutes to read. "
        "Teach one concept clearly, connect it to what is happening in the industry right now, "
        "and end with something the reader can try today. "
        "Return valid JSON only. Do not invent statistics or quotes."
    )

    LEVEL_GUIDANCE = {
        "Beginner": "Assume no prior knowledge of the subtopic. Define every term you introduce.",
        "Intermediate": "Assume the reader knows the basics. Focus on trade-offs and common mistakes.",
        "Advanced": "Assume solid experience. Cover edge cases, internals and production concerns.",
    }

    # ---------- MAIN LESSON ----------
    LESSON_TEMPLATE = """Write today's micro-lesson.

Track: {track}
Subtopic: {subtopic}
Level: {level}
{level_guidance}

Current trends in this area:
{trends_text}

Recent headlines you may reference:
{insights_text}

Requirements:
- "title": a specific, engaging title (under 80 characters)
- "hook": one or two sentences on why this matters today
- "sections": 3 to 4 sections, each with a "heading" and a "body" of 60-120 words
- "action_item": one concrete exercise the reader can finish in 15 minutes
- "tags": 3 to 5 short lowercase tags

Return JSON with exactly these keys:
{{
    "title": "...",
    "hook": "...",
    "sections": [{{"heading": "...", "body": "..."}}],
    "action_item": "...",
    "tags": ["..."]
}}"""

    # ---------- Builders ----------

    @classmethod
    def _format_trends(cls, trends: List[str]) -> str:
        if not trends:
            return "- (none available)"
        return "\n".join(f"- {trend}" for trend in trends)

    @classmethod
    def _format_insights(cls, insights: List[Insight]) -> str:
        """Format insights as compact numbered lines."""
        if not insights:
            return "- (none available)"
        lines = []
        for i, insight in enumerate(insights, 1):
            line = f"{i}. [{insight.source}] {insight.headline}"
            if insight.takeaway:
                takeaway = insight.takeaway if len(insight.takeaway) <= 240 else insight.takeaway[:237] + "..."
                line += f": {takeaway}"
            lines.append(line)
        return "\n".join(lines)

    @classmethod
    def get_lesson_prompt(cls, track: str, subtopic: str, level: str, content: AggregatedContent) -> str:
        """
        Build the user prompt for one lesson.

        Args:
            track: Track name
            subtopic: Subtopic chosen for today
            level: Difficulty level
            content: Aggregated (or curated) trends and insights

        Returns:
            Prompt text
        """
        return cls.LESSON_TEMPLATE.format(
            track=track,
            subtopic=subtopic,
            level=level,
            level_guidance=cls.LEVEL_GUIDANCE.get(level, ""),
            trends_text=cls._format_trends(content.trends),
            insights_text=cls._format_insights(content.insights)
        )


# Convenience aliases
SYSTEM_PROMPT = LessonPrompts.SYSTEM_PROMPT
get_lesson_prompt = LessonPrompts.get_lesson_prompt
