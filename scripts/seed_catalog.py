#!/usr/bin/env python3
"""
seed_catalog.py
---------------

Load a small demo catalog (categories, tools, blog posts and a maintenance
workflow) into an empty database. Existing rows with the same name or slug
are left untouched, so the script can be re-run safely.

Usage:
    python scripts/seed_catalog.py [--env development]
"""

import sys
import os
import argparse
from datetime import datetime, timezone

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app import create_app
from app.models.catalog import Category, Tool
from app.models.content import BlogPost, slugify
from app.models.db import db
from app.models.workflow import Workflow
from app.services.revalidation import mark_stale
from app.logger import logger

CONFIG_CLASSES = {
    "development": "app.config.DevelopmentConfig",
    "staging": "app.config.StagingConfig",
    "production": "app.config.ProductionConfig",
}

CATEGORIES = [
    {"name": "Language", "icon": "message-square", "color": "blue",
     "description": "Chat assistants and text generation"},
    {"name": "Design", "icon": "palette", "color": "pink",
     "description": "Image generation and design assistants"},
    {"name": "Code", "icon": "code", "color": "green",
     "description": "Coding assistants and developer tooling"},
    {"name": "Audio", "icon": "music", "color": "orange",
     "description": "Speech, voice and music generation"},
]

TOOLS = [
    {
        "name": "ChatGPT",
        "category": "Language",
        "description": "Conversational assistant for writing, analysis and coding.",
        "website": "https://chat.openai.com",
        "pricing": "Freemium",
        "weekly_users": 180000000,
        "growth": "+12%",
        "features": ["Chat", "File analysis", "Image input"],
        "tags": ["chat", "writing", "assistant"],
    },
    {
        "name": "Midjourney",
        "category": "Design",
        "description": "Text-to-image generation with a distinctive artistic style.",
        "website": "https://www.midjourney.com",
        "pricing": "Paid",
        "weekly_users": 15000000,
        "growth": "+8%",
        "features": ["Image generation", "Upscaling", "Style references"],
        "tags": ["image", "art"],
    },
    {
        "name": "GitHub Copilot",
        "category": "Code",
        "description": "AI pair programmer that suggests code in the editor.",
        "website": "https://github.com/features/copilot",
        "pricing": "Paid",
        "weekly_users": 1300000,
        "growth": "+35%",
        "features": ["Code completion", "Chat", "Pull request summaries"],
        "tags": ["code", "ide"],
    },
    {
        "name": "ElevenLabs",
        "category": "Audio",
        "description": "Realistic text-to-speech and voice cloning.",
        "website": "https://elevenlabs.io",
        "pricing": "Freemium",
        "weekly_users": 2000000,
        "growth": "+41%",
        "features": ["Text to speech", "Voice cloning", "Dubbing"],
        "tags": ["voice", "speech"],
    },
]

BLOG_POSTS = [
    {
        "title": "How we rank trending AI tools",
        "excerpt": "Growth, usage, ratings and recency, weighted by period.",
        "content": "Trending scores combine weekly users, growth, rating and review volume.",
        "author": "Editorial team",
        "category": "Guides",
        "read_time": "4 min read",
        "featured": True,
        "status": "published",
        "tags": ["trending", "methodology"],
    },
    {
        "title": "Choosing a coding assistant",
        "excerpt": "What to compare before picking an AI pair programmer.",
        "content": "Look at editor support, privacy terms and pricing per seat.",
        "author": "Editorial team",
        "category": "Reviews",
        "read_time": "6 min read",
        "status": "draft",
        "tags": ["code"],
    },
]

WORKFLOWS = [
    {
        "name": "Nightly maintenance",
        "description": "Recompute review stats and check catalog data quality.",
        "type": "maintenance",
        "status": "active",
        "is_active": True,
        "actions": [
            {"type": "recalculate_review_stats"},
            {"type": "data_quality_check"},
            {"type": "refresh_content", "content_type": "tools"},
        ],
    },
]


def seed():
    """Insert the demo rows that do not exist yet. Returns counts per table."""
    created = {"categories": 0, "tools": 0, "blog_posts": 0, "workflows": 0}

    for fields in CATEGORIES:
        if Category.get_by_name(fields["name"]) is None:
            db.session.add(Category(**fields))
            created["categories"] += 1
    for fields in TOOLS:
        if Tool.query.filter_by(name=fields["name"]).first() is None:
            db.session.add(Tool(source="seed", **fields))
            created["tools"] += 1
    for fields in BLOG_POSTS:
        slug = slugify(fields["title"])
        if BlogPost.get_by_slug(slug) is None:
            post = BlogPost(slug=slug, **fields)
            if post.status == "published":
                post.published_at = datetime.now(timezone.utc)
            db.session.add(post)
            created["blog_posts"] += 1
    for fields in WORKFLOWS:
        if Workflow.query.filter_by(name=fields["name"]).first() is None:
            db.session.add(Workflow(**fields))
            created["workflows"] += 1

    for content_type in ("tools", "categories", "blog"):
        mark_stale(content_type, updated_by="seed_catalog", commit=False)
    db.session.commit()
    return created


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Seed the demo catalog")
    parser.add_argument(
        "--env",
        choices=sorted(CONFIG_CLASSES),
        default=os.environ.get("FLASK_ENV", "development"),
        help="Configuration to load (default: FLASK_ENV or development)",
    )
    args = parser.parse_args()

    app = create_app(CONFIG_CLASSES.get(args.env, CONFIG_CLASSES["development"]))

    with app.app_context():
        created = seed()
        logger.info("Seed complete.", **created)


if __name__ == "__main__":
    main()
