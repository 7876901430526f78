"""Shared dependencies for API routes."""

import logging
from functools import lru_cache

from google import genai
from supabase import Client

from config import settings
from services import assessment_store, gemini_client
from services.entity_extractor import EntityExtractor

logger = logging.getLogger(__name__)


@lru_cache
def get_gemini_client() -> genai.Client | None:
    return gemini_client.create_client()


def get_entity_extractor() -> EntityExtractor:
    return EntityExtractor(get_gemini_client())


@lru_cache
def get_db_client() -> Client | None:
    """Supabase client, or None when the database is not configured."""
    if not settings.supabase_url or not settings.supabase_key:
        logger.warning("SUPABASE_URL/SUPABASE_KEY not set - database features disabled")
        return None
    return assessment_store.get_client()
