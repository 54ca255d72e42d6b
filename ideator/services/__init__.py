"""Service layer modules for the Content Ideator service."""
from .settings_store import SettingsStore, StoreEvent
from .generative_client import GenerativeContentClient
from .youtube_client import YouTubeSearchClient
from .media_assembler import LocalMediaAssembler
from .export_packager import ExportPackager
from .production import ProductionSession, ProductionManager
from .workspace import IdeationWorkspace, WorkspaceManager

__all__ = [
    "SettingsStore", "StoreEvent", "GenerativeContentClient", "YouTubeSearchClient",
    "LocalMediaAssembler", "ExportPackager", "ProductionSession", "ProductionManager",
    "IdeationWorkspace", "WorkspaceManager"
]
