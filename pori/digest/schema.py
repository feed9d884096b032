"""JSON Schema describing a digest, handed to the content-extraction service."""

from __future__ import annotations

DIGEST_JSON_SCHEMA: dict[str, object] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "digest",
    "type": "object",
    "description": (
        "A digest is a webpage that aggregates and presents a curated collection of "
        "content, typically organized in a concise and accessible format. It may be "
        "algorithmically generated or derived from user submissions, and usually "
        "features summaries, snippets, or headlines with votes or comments."
    ),
    "properties": {
        "title": {
            "type": "string",
            "description": "The title of the website or page.",
        },
        "entries": {
            "type": "array",
            "description": "A list of content items on the page.",
            "items": {
                "type": "object",
                "description": "A content item object",
                "properties": {
                    "title": {
                        "type": "string",
                        "description": "The title of the content item.",
                    },
                    "content": {
                        "type": "string",
                        "description": "The main content or description of the item.",
                    },
                    "url": {
                        "type": "string",
                        "format": "uri",
                        "description": "The URL to the full content or external link.",
                    },
                    "discussionUrl": {
                        "type": "string",
                        "format": "uri",
                        "description": "The URL to the comments or discussion of the content item.",
                    },
                    "author": {
                        "type": "object",
                        "description": "Information about the author of the content item.",
                        "properties": {
                            "name": {
                                "type": "string",
                                "description": "The name of the author.",
                            },
                            "url": {
                                "type": "string",
                                "format": "uri",
                                "description": "The URL to the author's profile page.",
                            },
                        },
                    },
                    "timestamp": {
                        "type": "string",
                        "format": "date-time",
                        "description": "When the item was published or created.",
                    },
                    "score": {
                        "type": "string",
                        "description": "The score or ranking of the content item, if applicable.",
                    },
                    "tags": {
                        "type": "array",
                        "description": "Tags or categories associated with the content item.",
                        "items": {"type": "string", "description": "A tag item"},
                    },
                },
            },
        },
    },
    "required": ["entries"],
}
