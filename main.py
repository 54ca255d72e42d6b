"""Entry point for the Content Ideator service."""

if __name__ == "__main__":
    import uvicorn
    from ideator.core.config import settings

    print(f"🚀 Starting {settings.api_title} v{settings.api_version}")
    print(f"🗂️ Settings store: {settings.settings_store_path}")
    print(f"📝 Log level: {settings.log_level}")

    uvicorn.run(
        "ideator.main:app",  # Use string import for hot reload
        host="0.0.0.0",
        port=8000,
        reload=settings.debug_mode,
        log_level=settings.log_level.lower()
    )
