from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.geoface_attendance.geoface_attendance.database.bootstrap import ensure_demo_tenant


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed a demo company with a geofence, an admin and an employee.")
    parser.add_argument("--company", default="DEMO01")
    parser.add_argument("--lat", type=float, default=12.9716)
    parser.add_argument("--lon", type=float, default=77.5946)
    parser.add_argument("--radius", type=int, default=100, help="geofence radius in meters")
    args = parser.parse_args()

    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    ensure_demo_tenant(db_config, company_code=args.company, center=(args.lat, args.lon), radius_meters=args.radius)

    print(
        f"OK: Seeded company {args.company} -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
    )


if __name__ == "__main__":
    main()
