import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI

from app.api.v1.routes import router as api_router
from app.config import get_settings

logger = logging.getLogger(__name__)


def load_environment(env_path: Path | None = None) -> bool:
    """
    Load `.env` from the repository root into the process environment.

    Variables already exported in the shell win over the file. Returns
    whether a file was loaded.
    """
    env_path = env_path or Path(__file__).parent.parent / ".env"

    print("\n" + "=" * 60)
    print("🔧 LOADING ENVIRONMENT CONFIGURATION")
    print("=" * 60)
    print(f"Looking for .env file at: {env_path}")

    loaded = False
    if env_path.exists():
        loaded = load_dotenv(dotenv_path=env_path, override=False)
        print("✓ .env file loaded successfully")
    else:
        print(f"⚠ .env file not found at: {env_path}")
        print("  Create it with: OPENROUTER_API_KEY=your_key_here")

    if os.environ.get("OPENROUTER_API_KEY"):
        print("✓ OPENROUTER_API_KEY set - AI text placement ENABLED")
    else:
        print("⚠ OPENROUTER_API_KEY not set - using style-based placement only")
    print("=" * 60 + "\n")
    return loaded


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app() -> FastAPI:
    """
    Application factory for the Text Overlay API.

    Keeping this as a separate function lets tests build a fresh app after
    adjusting the environment.
    """
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info("Using model %s at %s", settings.openrouter_model, settings.openrouter_base_url)

    app = FastAPI(
        title="Text Overlay API",
        version="0.1.0",
        description="Overlays text onto images, with optional AI-chosen placement.",
    )

    @app.get("/health", tags=["health"])
    async def root_health_check() -> dict:
        """Simple root health check endpoint."""
        return {"status": "ok"}

    app.include_router(api_router)

    return app


load_environment()
app = create_app()
