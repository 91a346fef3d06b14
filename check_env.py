#!/usr/bin/env python3
"""Helper script to check the .env file and the delivery zone registry it points at."""

from pathlib import Path
import os
import sys


ENV_TEMPLATE = """# Supabase Configuration (optional - zones are read from FITBOX_ZONES_FILE without it)
# Get these from: https://supabase.com/dashboard → Your Project → Settings → API
FITBOX_SUPABASE_URL=https://your-project-id.supabase.co
FITBOX_SUPABASE_KEY=your-service-role-key-here

# API Configuration
FITBOX_API_PREFIX=/api
FITBOX_LOG_LEVEL=INFO
# FITBOX_FRONTEND_ALLOWED_ORIGINS - comma-separated or JSON array
# FITBOX_FRONTEND_ALLOWED_ORIGINS=http://localhost:3000,http://127.0.0.1:3000

# Delivery scheduling
FITBOX_DELIVERY_TIMEZONE=America/Vancouver
FITBOX_CUTOFF_HOUR=18
FITBOX_FREE_DELIVERY_THRESHOLD=75.00

# Data Paths
FITBOX_DATA_ROOT=./data
FITBOX_ZONES_FILE=./data/delivery_zones.json

# Rate limits (requests per window, per client)
FITBOX_RATE_LIMIT_WINDOW_SECONDS=60
FITBOX_RATE_LIMIT_LIST=100
FITBOX_RATE_LIMIT_AVAILABILITY=60
FITBOX_RATE_LIMIT_VALIDATE=50
"""


def _mask(value: str, head: int = 20) -> str:
    return value if len(value) <= head + 10 else value[:head] + "..." + value[-10:]


def main():
    project_root = Path(__file__).parent
    env_file = project_root / ".env"

    print("=" * 60)
    print("FitBox Delivery Environment Checker")
    print("=" * 60)
    print()

    if env_file.exists():
        print(f"✅ Found .env file at: {env_file}")
        print("-" * 60)
        with open(env_file, "r", encoding="utf-8") as f:
            for line in f.read().split("\n"):
                if "FITBOX_SUPABASE_KEY" in line and "=" in line:
                    name, value = line.split("=", 1)
                    print(f"{name}={_mask(value.strip())}")
                else:
                    print(line)
        print("-" * 60)
        print()
    else:
        print(f"❌ .env file NOT found at: {env_file}")
        print("Creating template .env file...")
        with open(env_file, "w", encoding="utf-8") as f:
            f.write(ENV_TEMPLATE)
        print(f"✅ Created .env file at: {env_file}")
        print("⚠️  Edit .env before starting the server.")
        return

    for name in ("FITBOX_SUPABASE_URL", "FITBOX_SUPABASE_KEY"):
        value = os.getenv(name)
        if value:
            print(f"✅ {name} (from environment): {_mask(value)}")
        else:
            print(f"ℹ️  {name} not found in environment")
    print()

    print("Testing config loading and zone registry...")
    print()
    try:
        sys.path.insert(0, str(project_root / "src"))
        from fitbox.config import settings
        from fitbox.data.zones_repository import get_zone_registry
        from fitbox.services.delivery import find_overlapping_prefixes

        source = "Supabase" if settings.database_configured else f"file {settings.zones_file}"
        print(f"Zone registry source: {source}")
        print(f"Delivery timezone: {settings.delivery_timezone}, cutoff hour: {settings.cutoff_hour}:00")

        zones = get_zone_registry().list_zones(active_only=False)
        active = [zone for zone in zones if zone.is_active]
        print(f"✅ Loaded {len(zones)} zones ({len(active)} active)")

        overlaps = find_overlapping_prefixes(zones)
        if overlaps:
            print("=" * 60)
            print("❌ ERROR: postal prefixes claimed by more than one active zone")
            print("=" * 60)
            for fsa, zone_ids in overlaps.items():
                print(f"   {fsa}: {', '.join(zone_ids)}")
        else:
            print("=" * 60)
            print("✅ SUCCESS: zone registry is consistent")
            print("=" * 60)
    except Exception as e:
        print(f"❌ Error loading config or zones: {e}")
        print()
        print("Make sure you're running this from the project root directory")


if __name__ == "__main__":
    main()
