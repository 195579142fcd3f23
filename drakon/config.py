"""Configuration loaded from environment variables."""

import os

from dotenv import load_dotenv

load_dotenv()

# Logging
LOG_LEVEL: str = os.getenv("DRAKON_LOG_LEVEL", "WARNING").upper()

# Text measurement
FONT_SIZE: int = int(os.getenv("DRAKON_FONT_SIZE", "14"))

# Export
DEFAULT_FORMAT: str = os.getenv("DRAKON_DEFAULT_FORMAT", "json").lower()
GRAPHVIZ_ENGINE: str = os.getenv("DRAKON_GRAPHVIZ_ENGINE", "neato")
