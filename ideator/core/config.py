"""
Configuration management for the Content Ideator service.
Centralizes environment variable handling and application settings.
"""
import os
from typing import Dict, List, Tuple
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self):
        # API Configuration
        self.api_title = "Content Ideator Service"
        self.api_description = "Trend discovery, AI concept generation and asset production for video creators"
        self.api_version = "1.0.0"
        self.debug_mode = os.getenv("DEBUG_MODE", "false").lower() == "true"
        self.allowed_origins = ["*"]

        # Fallback credentials (the settings store takes precedence)
        self.openai_api_key = os.getenv("OPENAI_API_KEY", "")
        self.youtube_api_key = os.getenv("YOUTUBE_API_KEY", "")

        # Generative models
        self.text_model = os.getenv("TEXT_MODEL", "gpt-4o")
        self.planning_model = os.getenv("PLANNING_MODEL", "gpt-4o")
        self.image_model = os.getenv("IMAGE_MODEL", "gpt-image-1")
        self.image_quality = os.getenv("IMAGE_QUALITY", "medium")
        self.speech_model = os.getenv("SPEECH_MODEL", "gpt-4o-mini-tts")
        self.video_model = os.getenv("VIDEO_MODEL", "sora-2")
        self.video_clip_seconds = os.getenv("VIDEO_CLIP_SECONDS", "8")
        self.video_poll_interval = float(os.getenv("VIDEO_POLL_INTERVAL", "10"))

        # Video platform
        self.youtube_base_url = os.getenv("YOUTUBE_BASE_URL", "https://www.googleapis.com/youtube/v3")
        self.search_page_size = int(os.getenv("SEARCH_PAGE_SIZE", "15"))
        self.comment_page_size = int(os.getenv("COMMENT_PAGE_SIZE", "50"))
        self.http_timeout = int(os.getenv("HTTP_TIMEOUT", "30"))

        # Storage
        self.settings_store_path = os.getenv("SETTINGS_STORE_PATH", os.path.expanduser("~/.ideator/store.json"))
        self.production_work_dir = os.getenv("PRODUCTION_WORK_DIR", "")

        # Local media assembly
        self.sample_rate = int(os.getenv("SAMPLE_RATE", "24000"))
        self.assembly_fps = int(os.getenv("ASSEMBLY_FPS", "30"))
        self.canvas_base_width = int(os.getenv("CANVAS_BASE_WIDTH", "1280"))
        self.watermark_text = os.getenv("WATERMARK_TEXT", "AI Content Ideator")

        # Clip sampling
        self.short_form_clip_count = int(os.getenv("SHORT_FORM_CLIP_COUNT", "7"))
        self.long_form_clip_count = int(os.getenv("LONG_FORM_CLIP_COUNT", "18"))

        # Logging
        self.log_level = os.getenv("LOG_LEVEL", "INFO")
        self.log_format = os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")

        self.default_language = os.getenv("DEFAULT_LANGUAGE", "Korean")

class ProductionConfig:
    """Format-specific production configuration."""

    IMAGE_COUNT_RANGES: Dict[str, Tuple[int, int]] = {
        "short": (6, 16),
        "long": (30, 70),
    }

    ASPECT_RATIOS: Dict[str, str] = {
        "short": "9:16",
        "long": "16:9",
    }

    # Sizes accepted by the image and video endpoints
    IMAGE_SIZES: Dict[str, str] = {
        "16:9": "1536x1024",
        "9:16": "1024x1536",
        "1:1": "1024x1024",
    }

    VIDEO_SIZES: Dict[str, str] = {
        "16:9": "1280x720",
        "9:16": "720x1280",
    }

    @staticmethod
    def format_key(is_short_form: bool) -> str:
        return "short" if is_short_form else "long"

    @classmethod
    def get_image_count_range(cls, is_short_form: bool) -> Tuple[int, int]:
        """Get the allowed storyboard size for a format."""
        return cls.IMAGE_COUNT_RANGES[cls.format_key(is_short_form)]

    @classmethod
    def get_aspect_ratio(cls, is_short_form: bool) -> str:
        return cls.ASPECT_RATIOS[cls.format_key(is_short_form)]

    @classmethod
    def get_image_size(cls, aspect_ratio: str) -> str:
        return cls.IMAGE_SIZES.get(aspect_ratio, cls.IMAGE_SIZES["16:9"])

    @classmethod
    def get_video_size(cls, aspect_ratio: str) -> str:
        return cls.VIDEO_SIZES.get(aspect_ratio, cls.VIDEO_SIZES["16:9"])

    @classmethod
    def supported_aspect_ratios(cls) -> List[str]:
        return list(cls.VIDEO_SIZES.keys())

# Create global settings instance
settings = Settings()
