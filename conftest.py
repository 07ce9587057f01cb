"""Test settings come from .env.test; it must be loaded before ``portal_messaging.config`` is imported."""
from __future__ import annotations

from pathlib import Path

from dotenv import load_dotenv

# variables already exported in the shell take precedence
load_dotenv(Path(__file__).resolve().parent / ".env.test", override=False)
