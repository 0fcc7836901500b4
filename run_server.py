"""
Run script to start the FastAPI server (no reload).
"""
import uvicorn
import os
import sys

# Add the project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from app.config import settings  # noqa: E402


def main():
    """Start the Uvicorn server."""
    print(f"🚀 Starting {settings.PROJECT_NAME}...")
    print(f"📖 API Documentation: http://localhost:{settings.PORT}/docs")
    print(f"💓 Health check: http://localhost:{settings.PORT}{settings.API_PREFIX}/health")
    print("-" * 50)

    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=False,
        log_level=settings.LOG_LEVEL.lower()
    )


if __name__ == "__main__":
    main()
