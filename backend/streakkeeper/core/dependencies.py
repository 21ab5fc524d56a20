"""
Dependency injection for shared clients and resources
"""
from typing import Optional
import logging

from supabase import create_client, Client

from streakkeeper.core.config import settings
from streakkeeper.services.habits.repository import HabitRepository, InMemoryHabitRepository
from streakkeeper.services.habits.service import HabitService

logger = logging.getLogger(__name__)

# Singletons, created on first use
_repository: Optional[HabitRepository] = None
_habit_service: Optional[HabitService] = None


def get_supabase_client() -> Client:
    """Get Supabase client instance"""
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)


def get_repository() -> HabitRepository:
    """
    Get the habit repository: Supabase when credentials are configured,
    otherwise an in-memory store
    """
    global _repository

    if _repository is None:
        if settings.supabase_configured:
            from streakkeeper.services.habits.supabase_repository import SupabaseHabitRepository
            _repository = SupabaseHabitRepository(get_supabase_client())
            logger.info("Using Supabase habit repository")
        else:
            _repository = InMemoryHabitRepository()
            logger.warning("Supabase not configured - using in-memory habit repository")
    return _repository


def get_habit_service() -> HabitService:
    """Get the habit service bound to the shared repository"""
    global _habit_service

    if _habit_service is None:
        _habit_service = HabitService(get_repository())
    return _habit_service


def reset_dependencies(repository: Optional[HabitRepository] = None) -> None:
    """Drop the cached singletons, optionally installing a repository"""
    global _repository, _habit_service

    _repository = repository
    _habit_service = None
