"""Fetch one row from each catalog table and list its columns, to check the row mapping against the live schema."""
import os
import sys

# Ensure package is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from green_globe_catalog.adapter import CATALOG_TABLES, CatalogLoadError, make_client, rows_to_records
from green_globe_catalog.config import PROJECT_ROOT, get_settings, load_env_file


def main():
    load_env_file(PROJECT_ROOT / ".env")
    settings = get_settings()
    try:
        client = make_client(settings.supabase_url, settings.supabase_anon_key)
    except CatalogLoadError as e:
        print(e)
        sys.exit(1)

    for catalog_type, table in CATALOG_TABLES.items():
        try:
            rows = client.table(table).select("*").limit(1).execute().data or []
        except Exception as e:
            print(f"{table}: select failed:", e)
            continue
        if not rows:
            print(f"{table}: no rows")
            continue
        print(f"{table} columns:")
        for i, col in enumerate(sorted(rows[0]), 1):
            print(f"  {i}. {col}")
        records = rows_to_records(rows, catalog_type)
        if records:
            r = records[0]
            print(f"  -> {r.to_short_label()}: region={r.location_region!r} rating={r.rating}")
        else:
            print("  -> row could not be mapped (missing id or name)")


if __name__ == "__main__":
    main()
