"""
Sample ideas for development databases.

Seeding is not idempotent: every run submits fresh copies.
"""

import logging
from typing import Dict, List

from ideaswipe.engine import IdeaEngine
from ideaswipe.models import Idea, IdeaDraft

logger = logging.getLogger(__name__)


DEFAULT_SEED_AUTHOR = "seed-author"

SAMPLE_IDEAS: List[Dict] = [
    {
        "title": "EcoTrack",
        "description": "A mobile app that tracks the carbon footprint of daily activities "
                       "and suggests personal ways to reduce it, with community challenges.",
        "tags": ["sustainability", "climate-tech", "mobile-app"],
    },
    {
        "title": "MindfulMinutes",
        "description": "A meditation platform that adapts each session to your mood, stress "
                       "level and the time you have available.",
        "tags": ["mental-health", "wellness", "ai"],
    },
    {
        "title": "LocalEats Collective",
        "description": "Weekly subscription boxes of seasonal produce sourced directly from "
                       "local farms, with full transparency about where food comes from.",
        "tags": ["food-tech", "subscription", "sustainability"],
    },
    {
        "title": "CodeBuddy AI",
        "description": "A pair programming assistant that explains concepts, reviews code "
                       "quality and suggests refactorings inside every major IDE.",
        "tags": ["developer-tools", "ai", "productivity"],
    },
    {
        "title": "SeniorConnect",
        "description": "A simplified communication platform for seniors with large text, voice "
                       "commands, photo sharing and automated family check-ins.",
        "tags": ["eldercare", "social", "health-tech"],
    },
    {
        "title": "SkillSwap",
        "description": "A time-banking platform where people teach what they know and learn "
                       "what they want using time credits instead of money.",
        "tags": ["education", "community", "sharing-economy"],
    },
    {
        "title": "NutriScan",
        "description": "Scan food products to get nutrition insights matched to your dietary "
                       "goals and restrictions, with alternatives when a product does not fit.",
        "tags": ["health-tech", "nutrition", "mobile-app"],
    },
    {
        "title": "RentalRights",
        "description": "Helps renters understand their legal rights with document templates, "
                       "automated letters and affordable access to tenant lawyers.",
        "tags": ["legal-tech", "housing", "consumer"],
    },
]


def seed_ideas(engine: IdeaEngine, author_id: str = DEFAULT_SEED_AUTHOR) -> List[Idea]:
    """
    Submit every sample idea under author_id.

    Args:
        engine: Engine to submit through.
        author_id: Author recorded on each idea.

    Returns:
        The stored ideas, in submission order.
    """
    ideas = []
    for sample in SAMPLE_IDEAS:
        draft = IdeaDraft(author_id=author_id, **sample)
        ideas.append(engine.submit_idea(draft))

    logger.info("Seeded %d sample ideas as %s", len(ideas), author_id)
    return ideas
