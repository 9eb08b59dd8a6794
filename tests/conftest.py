"""Shared fixtures."""

from __future__ import annotations

import pytest

from coursecraft.models.mindmap import MindMapNode


@pytest.fixture()
def course() -> MindMapNode:
    """A two-level course with one nested lesson."""

    return MindMapNode.from_payload(
        {
            "id": "root",
            "title": "Test Course",
            "description": "A test course",
            "level": 0,
            "children": [
                {
                    "id": "module-1",
                    "title": "JavaScript Basics",
                    "description": "Learn JavaScript",
                    "level": 1,
                    "difficulty": "beginner",
                    "estimatedHours": 2,
                    "skills": ["Variables", "Functions"],
                    "prerequisites": ["HTML Basics"],
                    "children": [
                        {
                            "id": "lesson-1",
                            "title": "Loops",
                            "level": 2,
                            "difficulty": "beginner",
                            "estimatedHours": 1,
                            "skills": ["for", "while"],
                            "children": [],
                        }
                    ],
                },
                {
                    "id": "module-2",
                    "title": "React Components",
                    "description": "Build React apps",
                    "level": 1,
                    "difficulty": "intermediate",
                    "estimatedHours": 3,
                    "skills": ["JSX", "Props"],
                    "prerequisites": ["JavaScript Basics"],
                    "children": [],
                },
            ],
        }
    )
