#!/usr/bin/env python3
"""
Centralized JSON schemas for OpenAI structured outputs.

Contains the JSON schema used for lesson composition responses.
"""

from typing import Dict, Any

# Schema for a composed micro-lesson
LESSON_SCHEMA = {
    "type": "object",
    "properties": {
        "title": {
            "type": "string",
            "description": "Lesson title (under 80 characters)"
        },
        "hook": {
            "type": "string",
            "description": "One or two sentences on why the topic matters today"
        },
        "sections": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "heading": {
                        "type": "string",
                        "description": "Section heading"
                    },
                    "body": {
                        "type": "string",
                        "description": "Section text"
                    }
                },
                "required": ["heading", "body"],
                "additionalProperties": False
            },
            "description": "Lesson body split into headed sections"
        },
        "action_item": {
            "type": "string",
            "description": "A concrete exercise for the reader"
        },
        "tags": {
            "type": "array",
            "items": {"type": "string"},
            "description": "Short lowercase topic tags"
        }
    },
    "required": ["title", "hook", "sections", "action_item", "tags"],
    "additionalProperties": False
}


def get_schema_by_type(schema_type: str) -> Dict[str, Any]:
    """
    Get JSON schema by type name.

    Args:
        schema_type: Type of schema ("lesson")

    Returns:
        JSON schema dictionary

    Raises:
        ValueError: If schema_type is not recognized
    """
    schemas = {
        "lesson": LESSON_SCHEMA
    }

    if schema_type not in schemas:
        raise ValueError(f"Unknown schema type: {schema_type}. Available: {list(schemas.keys())}")

    return schemas[schema_type]
