#!/usr/bin/env python3
"""Script to verify OSRM and UK Police API connectivity."""

import asyncio
import sys
from pathlib import Path

# Add src to path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root / "src"))

from safetravel.config import settings
from safetravel.services.crime.police_client import PoliceAPIClient
from safetravel.services.crime.police_client import check_health as police_health
from safetravel.services.routing.osrm_client import OSRMClient
from safetravel.services.routing.osrm_client import check_health as osrm_health

# Two points in central London.
TEST_COORDS = [(51.5074, -0.1278), (51.5155, -0.0922)]


def main():
    print("=" * 60)
    print("Upstream Connection Test")
    print("=" * 60)
    print()

    print("1. Configuration...")
    print(f"   OSRM Base URL:   {settings.osrm_base_url}")
    print(f"   Police API URL:  {settings.police_api_base_url}")
    print(f"   Crime month:     {settings.crime_data_month}")
    print()

    print("2. Health checks...")
    osrm_ok = osrm_health()
    police_ok = police_health()
    print(f"   [{'OK' if osrm_ok else 'ERROR'}] OSRM")
    print(f"   [{'OK' if police_ok else 'ERROR'}] Police API")
    print()

    print("3. OSRM route request...")
    try:
        data = asyncio.run(OSRMClient().route(TEST_COORDS))
        route = data["routes"][0]
        print(f"   [OK] {len(route['geometry']['coordinates'])} points, {route['distance']:.0f}m, {route['duration']:.0f}s")
    except Exception as e:
        print(f"   [ERROR] {e}")
        return 1
    print()

    print("4. Police street-crime request...")
    try:
        lat, lng = TEST_COORDS[0]
        incidents = asyncio.run(PoliceAPIClient().street_crimes(lat, lng, settings.crime_data_month))
        print(f"   [OK] {len(incidents)} incidents near [{lat}, {lng}]")
    except Exception as e:
        print(f"   [ERROR] {e}")
        return 1
    print()

    print("=" * 60)
    print("[SUCCESS] Upstream services are reachable!")
    print("=" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(main())
