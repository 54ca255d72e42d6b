"""Dependency injection setup for FastAPI."""
from functools import lru_cache
from fastapi import Depends

from ..services import (
    SettingsStore, GenerativeContentClient, YouTubeSearchClient,
    LocalMediaAssembler, ExportPackager, ProductionManager, WorkspaceManager
)

# Service instances cache
@lru_cache()
def get_settings_store() -> SettingsStore:
    """Get SettingsStore instance."""
    return SettingsStore()

@lru_cache()
def get_generative_client() -> GenerativeContentClient:
    """Get GenerativeContentClient service instance."""
    return GenerativeContentClient(get_settings_store())

@lru_cache()
def get_youtube_client() -> YouTubeSearchClient:
    """Get YouTubeSearchClient service instance."""
    return YouTubeSearchClient(get_settings_store())

@lru_cache()
def get_media_assembler() -> LocalMediaAssembler:
    return LocalMediaAssembler()

@lru_cache()
def get_export_packager() -> ExportPackager:
    return ExportPackager()

@lru_cache()
def get_workspace_manager() -> WorkspaceManager:
    """Get WorkspaceManager instance."""
    return WorkspaceManager(get_settings_store(), get_generative_client(), get_youtube_client())

@lru_cache()
def get_production_manager() -> ProductionManager:
    """Get ProductionManager instance."""
    return ProductionManager(get_generative_client(), get_media_assembler(), get_export_packager())

# Service dependencies
def get_settings_store_dep(
    store: SettingsStore = Depends(get_settings_store)
) -> SettingsStore:
    """Dependency for SettingsStore."""
    return store

def get_youtube_client_dep(
    client: YouTubeSearchClient = Depends(get_youtube_client)
) -> YouTubeSearchClient:
    """Dependency for YouTubeSearchClient."""
    return client

def get_workspace_manager_dep(
    manager: WorkspaceManager = Depends(get_workspace_manager)
) -> WorkspaceManager:
    """Dependency for WorkspaceManager."""
    return manager

def get_production_manager_dep(
    manager: ProductionManager = Depends(get_production_manager)
) -> ProductionManager:
    """Dependency for ProductionManager."""
    return manager
