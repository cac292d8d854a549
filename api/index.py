"""ABOUTME: Vercel serverless entrypoint for the Wisdom Agent.
ABOUTME: Wraps FastAPI app for Vercel Python runtime."""

import sys
from pathlib import Path

# Add project root to path so wisdom_agent module can be imported
sys.path.insert(0, str(Path(__file__).parent.parent))

from wisdom_agent.config import configure_logging, get_settings  # noqa: E402
from wisdom_agent.main import create_app  # noqa: E402

configure_logging(get_settings())
app = create_app()
