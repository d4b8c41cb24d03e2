"""Entry point for the YouTube Thumbnail Studio service."""

if __name__ == "__main__":
    import uvicorn
    from app.main import app
    from app.core.config import settings

    print(f"🚀 Starting {settings.api_title} v{settings.api_version}")
    print(f"🎨 Style schema: {settings.style_schema_version}")
    print(f"🤖 Style analysis: {'enabled' if settings.openai_api_key and settings.enable_style_analysis else 'default style only'}")
    print(f"🔧 Max concurrent generations: {settings.max_concurrent_generations}")
    print(f"📝 Log level: {settings.log_level}")

    uvicorn.run(
        "app.main:app",  # Use string import for hot reload
        host="0.0.0.0",
        port=8000,
        reload=settings.debug_mode,
        log_level=settings.log_level.lower()
    )
