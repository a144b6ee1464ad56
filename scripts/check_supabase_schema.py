# Check that every AsthmaCare table is reachable with the configured credentials
from __future__ import annotations
import os
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import toml
from dotenv import load_dotenv
from postgrest.exceptions import APIError

from asthmacare.data.supabase_client import TABLES, create_supabase_client
from asthmacare.errors import ConfigurationError, format_database_error
from asthmacare.settings import AppSettings


def load_credentials():
    """[supabase] url/key from .streamlit/secrets.toml, else SUPABASE_URL/SUPABASE_KEY."""
    secrets_path = project_root / ".streamlit" / "secrets.toml"
    if secrets_path.exists():
        supabase = toml.load(secrets_path).get("supabase", {})
        if supabase.get("url") and supabase.get("key"):
            return supabase["url"], supabase["key"]

    load_dotenv()
    return os.getenv("SUPABASE_URL"), os.getenv("SUPABASE_KEY")


def main() -> int:
    url, key = load_credentials()
    try:
        client = create_supabase_client(AppSettings(supabase_url=url, supabase_key=key))
    except ConfigurationError as e:
        print(f"Configuration error: {e.message}")
        return 1

    missing = []
    for table in TABLES.values():
        print(f"\n{'='*60}")
        print(f"Table: {table}")
        print(f"{'='*60}")
        try:
            response = client.table(table).select("*").limit(1).execute()
            if response.data:
                print("Columns:")
                for column, value in response.data[0].items():
                    print(f"  - {column}: {type(value).__name__}")
            else:
                print("  (reachable, no rows visible)")
        except APIError as e:
            print(f"  Error [{e.code}]: {format_database_error(e.code)} ({e.message})")
            missing.append(table)

    if missing:
        print(f"\n{len(missing)} table(s) not reachable: {', '.join(missing)}")
        print("Apply supabase/schema.sql in the Supabase SQL editor.")
        return 1

    print("\nAll tables reachable.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
