"""Seed catalog: the built-in challenges and community essays.

Seed challenges win over dynamically authored ones that reuse an id.
Prices are whole currency units.
"""

from __future__ import annotations

from typing import Any

SEED_CHALLENGES: list[dict[str, Any]] = [
    {
        "id": 1,
        "title": "The Philosophy of Everyday Life",
        "category": "Philosophy",
        "type": "essay",
        "duration": "Flexible",
        "participants": 1247,
        "difficulty": "Intermediate",
        "description": (
            "Explore how ancient wisdom applies to modern living. Write essays on stoicism, "
            "existentialism, and practical philosophy."
        ),
        "tasks": [
            {"id": 1, "name": "Read Meditations excerpt", "status": "pending"},
            {"id": 2, "name": "Write essay on stoicism", "status": "pending"},
            {"id": 3, "name": "Share with partner", "status": "pending"},
            {"id": 4, "name": "Revise based on feedback", "status": "pending"},
        ],
        "startDate": "Nov 18, 2025",
        "price": 0,
        "weeks": [
            {
                "week": 1,
                "title": "Introduction to Stoicism",
                "prompt": "How can Marcus Aurelius's 'Meditations' guide us through modern challenges?",
                "dueDate": "Nov 25",
                "essays": 47,
            },
            {
                "week": 2,
                "title": "Existential Freedom",
                "prompt": "What does Sartre mean by 'existence precedes essence' and how does it apply to your life?",
                "dueDate": "Dec 2",
                "essays": 0,
            },
        ],
        "resources": [
            {
                "type": "book",
                "title": "Meditations by Marcus Aurelius",
                "source": "Penguin Classics",
                "description": "The foundational text on Stoic philosophy.",
            },
            {
                "type": "podcast",
                "title": "Daily Stoic Podcast",
                "source": "Ryan Holiday",
                "description": "15-min episodes exploring practical Stoicism with real-world examples.",
            },
        ],
        "learnings": [
            "The dichotomy of control: What's in your power vs. what's not",
            "Virtue as the highest good (wisdom, justice, courage, temperance)",
        ],
    },
    {
        "id": 2,
        "title": "Make Hollandaise Sauce",
        "category": "Cooking",
        "type": "skill",
        "duration": "2 weeks",
        "participants": 412,
        "difficulty": "Beginner",
        "description": (
            "Master the classic French sauce from scratch. Learn the technique, troubleshoot common "
            "issues, and cook something delicious."
        ),
        "tasks": [
            {"id": 1, "name": "Watch Gordon Ramsay's tutorial", "status": "pending"},
            {"id": 2, "name": "Study emulsification science", "status": "pending"},
            {"id": 3, "name": "Practice making sauce (attempt 1)", "status": "pending"},
            {"id": 4, "name": "Cook final dish with eggs royale", "status": "pending"},
            {"id": 5, "name": "Photograph and share results", "status": "pending"},
        ],
        "startDate": "Now",
        "price": 0,
        "outcome": "Cook and photograph eggs Royale with perfect hollandaise",
        "weeks": [],
        "resources": [
            {
                "type": "video",
                "title": "Hollandaise 101 - Gordon Ramsay",
                "source": "YouTube",
                "description": "5-min fast-paced tutorial. Key: warm yolks, cold butter, whisking constantly.",
            },
            {
                "type": "article",
                "title": "The Science of Hollandaise",
                "source": "Cook's Illustrated",
                "description": "Temperature control, ratios, troubleshooting broken sauce.",
            },
        ],
        "learnings": [
            "Emulsion basics: fat in liquid stays stable when whisked properly",
            "Fixing a broken sauce: add cold water and whisk, or start fresh",
        ],
    },
    {
        "id": 3,
        "title": "Creative Non-Fiction Workshop",
        "category": "Writing",
        "type": "essay",
        "duration": "6 weeks",
        "participants": 892,
        "difficulty": "All Levels",
        "description": (
            "Master the art of telling true stories. Learn narrative techniques, voice development, "
            "and memoir writing."
        ),
        "tasks": [
            {"id": 1, "name": "Write about a transformative moment", "status": "pending"},
            {"id": 2, "name": "Create character profiles", "status": "pending"},
            {"id": 3, "name": "Write dialogue-heavy scene", "status": "pending"},
            {"id": 4, "name": "Polish and edit your best piece", "status": "pending"},
            {"id": 5, "name": "Get partner feedback", "status": "pending"},
            {"id": 6, "name": "Share to community portfolio", "status": "pending"},
        ],
        "startDate": "Nov 20, 2025",
        "price": 0,
        "weeks": [
            {
                "week": 1,
                "title": "Finding Your Voice",
                "prompt": "Write about a moment that changed you. Focus on sensory details and honest emotion.",
                "dueDate": "Nov 27",
                "essays": 34,
            },
        ],
        "resources": [
            {
                "type": "book",
                "title": "The Art of Memoir by Mary Karr",
                "source": "Harper",
                "description": "Finding your authentic voice, structure, and emotional truth in personal narrative.",
            },
        ],
        "learnings": [
            "Show vs. tell: Use sensory details and scenes instead of summary",
            "Finding your voice: Authenticity and perspective make your story unique",
        ],
    },
    {
        "id": 12,
        "title": "Building a Personal Stoic Practice",
        "category": "Philosophy",
        "type": "essay",
        "duration": "8 weeks",
        "participants": 456,
        "difficulty": "Advanced",
        "description": (
            "Deep dive into Stoic philosophy and create your own daily practice. "
            "Advanced philosophy students welcome."
        ),
        "tasks": [
            {"id": 1, "name": "Read Marcus Aurelius completely", "status": "pending"},
            {"id": 2, "name": "Study Seneca's letters", "status": "pending"},
            {"id": 3, "name": "Design personal stoic practice", "status": "pending"},
            {"id": 4, "name": "Write 8 weekly reflections", "status": "pending"},
            {"id": 5, "name": "Create practice manifesto", "status": "pending"},
        ],
        "startDate": "Dec 1, 2025",
        "price": 49,
        "weeks": [],
        "resources": [
            {
                "type": "book",
                "title": "Letters from a Stoic by Seneca",
                "source": "Penguin Classics",
                "description": "124 letters on virtue, friendship, aging, death, and finding meaning.",
            },
        ],
        "learnings": [
            "The Four Cardinal Virtues: Wisdom, Justice, Courage, Temperance",
            "Prosoche: Mindful attention to your impressions and judgments",
        ],
    },
]

SEED_COMMUNITY_ESSAYS: list[dict[str, Any]] = [
    {
        "id": "seed-1",
        "title": "Finding Stoicism in the Subway",
        "author": "Sarah Chen",
        "challenge": "The Philosophy of Everyday Life",
        "excerpt": (
            "The 6 train was delayed again. As passengers around me groaned, I remembered Marcus Aurelius: "
            "'You have power over your mind - not outside events.'"
        ),
        "readTime": 8,
        "likes": 142,
        "commentCount": 28,
        "views": 1834,
        "publishedAt": "2025-11-15T09:00:00+00:00",
        "validatedByPartner": True,
        "isPublic": True,
        "content": (
            "The 6 train was delayed again. As passengers around me groaned and checked their phones "
            "frantically, I remembered Marcus Aurelius: \"You have power over your mind - not outside "
            "events. Realize this, and you will find strength.\""
        ),
    },
    {
        "id": "seed-2",
        "title": "The Economics of My Morning Coffee",
        "author": "James Rodriguez",
        "challenge": "Economics for the Curious Mind",
        "excerpt": (
            "I've bought the same coffee at the same café for three years. Last week, the price jumped "
            "from $4.50 to $5.75. My outrage lasted exactly until I learned why."
        ),
        "readTime": 6,
        "likes": 89,
        "commentCount": 15,
        "views": 1203,
        "publishedAt": "2025-11-13T09:00:00+00:00",
        "validatedByPartner": True,
        "isPublic": True,
        "content": (
            "I've bought the same coffee at the same café for three years. Last week, the price jumped "
            "from $4.50 to $5.75. My outrage lasted exactly until I learned why."
        ),
    },
    {
        "id": "seed-3",
        "title": "My Grandmother's Hands",
        "author": "Maria Santos",
        "challenge": "Creative Non-Fiction Workshop",
        "excerpt": (
            "She taught me to make empanadas when I was seven, her fingers moving with the kind of "
            "confidence that comes from five decades of repetition."
        ),
        "readTime": 10,
        "likes": 234,
        "commentCount": 41,
        "views": 2567,
        "publishedAt": "2025-11-10T09:00:00+00:00",
        "validatedByPartner": True,
        "isPublic": True,
        "content": (
            "She taught me to make empanadas when I was seven, her fingers moving with the kind of "
            "confidence that comes from five decades of repetition."
        ),
    },
]
