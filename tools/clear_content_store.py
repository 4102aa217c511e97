#!/usr/bin/env python3
"""
Delete every photo document, then every post document, from the content store.

Photos go first because they reference posts. The next ingestion cycle
recreates everything still present in the feed.

Usage:
    python tools/clear_content_store.py --yes
"""
import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from hop.adapters.sanity_api import SanityStore, Q_ALL_PHOTOS, Q_ALL_POSTS
from hop.core.config import load_config

def clear(store: SanityStore) -> None:
    store.delete_by_query(Q_ALL_PHOTOS)
    store.delete_by_query(Q_ALL_POSTS)

def main() -> int:
    parser = argparse.ArgumentParser(description="Wipe all post and photo documents")
    parser.add_argument("--yes", action="store_true", help="confirm the wipe")
    args = parser.parse_args()
    if not args.yes:
        print("Refusing to wipe without --yes")
        return 2
    clear(SanityStore(load_config(ROOT)))
    print("Content store cleared")
    return 0

if __name__ == "__main__":
    sys.exit(main())
