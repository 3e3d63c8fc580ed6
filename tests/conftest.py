"""Pytest configuration for the TileNotes test suite."""

import os
import sys
from pathlib import Path


def _ensure_test_env() -> None:
    """Seed required environment variables before settings are imported."""
    os.environ.setdefault("APP_SUPABASE_URL", "http://supabase.test")
    os.environ.setdefault("APP_SUPABASE_ANON_KEY", "test-anon-key")
    os.environ.setdefault("APP_SUPABASE_SERVICE_ROLE_KEY", "test-service-key")
    os.environ.setdefault("APP_OPENAI_API_KEY", "test-openai-key")
    os.environ.setdefault("APP_ENABLE_RATE_LIMITING", "false")


_ensure_test_env()

ROOT = Path(__file__).resolve().parents[1]
BACKEND = ROOT / "backend"
sys.path.insert(0, str(BACKEND))
