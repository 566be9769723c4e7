#!/usr/bin/env python3
"""Check the .env file and the settings the API will start with."""

from pathlib import Path
import os
import sys

ENV_TEMPLATE = """# Storage backend: "supabase" (managed) or "sqlite" (legacy local store)
CHECKLIST_STORAGE_BACKEND=supabase

# Supabase configuration (required for the supabase backend)
# Get these from: https://supabase.com/dashboard → Your Project → Settings → API
CHECKLIST_SUPABASE_URL=https://your-project-id.supabase.co
CHECKLIST_SUPABASE_KEY=your-service-role-key-here
CHECKLIST_SITE_URL=http://localhost:3000

# Local store (only used with CHECKLIST_STORAGE_BACKEND=sqlite)
CHECKLIST_SQLITE_PATH=./data/visitlog.db

# API configuration
CHECKLIST_API_PREFIX=/api
CHECKLIST_LOG_LEVEL=INFO
# CHECKLIST_FRONTEND_ALLOWED_ORIGINS accepts a JSON array or a comma-separated list
"""

SECRET_KEYS = ("CHECKLIST_SUPABASE_KEY",)


def _mask(line: str) -> str:
    name, sep, value = line.partition("=")
    value = value.strip()
    if sep and name.strip() in SECRET_KEYS and len(value) > 20:
        return f"{name}={value[:20]}...{value[-10:]}"
    return line


def main():
    project_root = Path(__file__).parent
    env_file = project_root / ".env"

    print("=" * 60)
    print("Checklist Environment Checker")
    print("=" * 60)
    print()

    if not env_file.exists():
        print(f"❌ .env file NOT found at: {env_file}")
        env_file.write_text(ENV_TEMPLATE, encoding="utf-8")
        print(f"✅ Created template .env file at: {env_file}")
        print("⚠️  Edit it and add your Supabase credentials, or switch to the sqlite backend.")
        return

    print(f"✅ Found .env file at: {env_file}")
    print("-" * 60)
    for line in env_file.read_text(encoding="utf-8").splitlines():
        print(_mask(line))
    print("-" * 60)
    print()

    for name in ("CHECKLIST_STORAGE_BACKEND", "CHECKLIST_SUPABASE_URL", "CHECKLIST_SUPABASE_KEY"):
        value = os.getenv(name)
        if value:
            print(f"✅ {name} (from environment): {value[:20]}...")
        else:
            print(f"ℹ️  {name} not set in environment (the .env file may still provide it)")
    print()

    sys.path.insert(0, str(project_root / "src"))
    try:
        from checklist.config import settings
    except Exception as e:
        print(f"❌ Error loading config: {e}")
        print("Make sure you're running this from the project root directory")
        return

    print(f"Backend: {settings.storage_backend}")
    if settings.storage_backend == "sqlite":
        print(f"✅ Local store: {settings.sqlite_path}")
        return

    if settings.supabase_url and settings.supabase_key:
        print("=" * 60)
        print("✅ SUCCESS: Supabase is configured!")
        print("=" * 60)
    else:
        print("=" * 60)
        print("❌ ERROR: Supabase is NOT configured")
        print("=" * 60)
        print("1. Make sure .env exists in the project root")
        print("2. Make sure variables start with the CHECKLIST_ prefix")
        print("3. Restart the backend after editing .env")


if __name__ == "__main__":
    main()
