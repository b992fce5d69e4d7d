"""
Run the SmartSignal API server.
"""
import os

# Load environment
from dotenv import load_dotenv

project_dir = os.path.dirname(os.path.abspath(__file__))
load_dotenv(os.path.join(project_dir, ".env"))

# Run uvicorn
import uvicorn

from smartsignal.core.config import get_settings

if __name__ == "__main__":
    settings = get_settings()

    print("Starting SmartSignal API Server...")
    print(f"API Docs: http://localhost:{settings.port}/docs")
    print("-" * 50)

    uvicorn.run(
        "smartsignal.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
