#!/usr/bin/env python3
"""
Connection Check Script

Run this to verify both database connections are working, and optionally
create the tables and seed reference data.
Usage: python scripts/check_connections.py [--init]
"""
import sys

from placement_portal.core.config import get_settings
from placement_portal.db.mongodb import check_mongo_connection, init_mongo_indexes
from placement_portal.db.postgres import check_postgres_connection, engine
from placement_portal.db.tables import init_tables
from placement_portal.services.reference_service import seed_reference_data


def main() -> int:
    settings = get_settings()
    print("=" * 50)
    print("PLACEMENT PORTAL - CONNECTION CHECK")
    print("=" * 50)

    print("\n[1] Checking relational database...")
    print(f"    URL: {engine.url.render_as_string(hide_password=True)}")
    postgres_ok = check_postgres_connection()
    print("    Relational DB: CONNECTED" if postgres_ok else "    Relational DB: FAILED")

    print("\n[2] Checking MongoDB...")
    print(f"    URI: {settings.mongodb_uri}")
    print(f"    Database: {settings.mongodb_db}")
    mongo_ok = check_mongo_connection()
    print("    MongoDB: CONNECTED" if mongo_ok else "    MongoDB: FAILED")

    if "--init" in sys.argv[1:] and postgres_ok and mongo_ok:
        print("\n[3] Creating tables and indexes...")
        init_tables(engine)
        seed_reference_data()
        init_mongo_indexes()
        print("    Done")

    print("\n" + "=" * 50)
    print("Connection check complete!")
    print("=" * 50)
    return 0 if postgres_ok and mongo_ok else 1


if __name__ == "__main__":
    sys.exit(main())
