#!/usr/bin/env python3
# Hoptoad Tracker – PredictWind ingest → Google Sheets log + Sanity content + Twilio SMS
#
# Cycles:
# - ingest    (every ingest_interval_s, default 10 min)
#     new fixes   -> "Locations" tab
#     new posts   -> Sanity post + photo documents, "Blog Posts" tab, one SMS per subscriber
# - reconcile (every reconcile_interval_s, default 1 h)
#     stored posts whose title/html changed upstream are republished (two-phase replace)
#
# Files:
# - config.json                  (tracked)  urls, spreadsheet id, sanity project, intervals
# - secrets.json                 (local, NOT tracked) {"sanity_token": "...", "twilio_account_sid": "...", "twilio_auth_token": "..."}
# - google_service_account.json  (local, NOT tracked) service account with edit access to the sheet
# - logs/bot-YYYY-MM-DD.log

import argparse
import pathlib
import sys

from hop.core.config import load_config
from hop.core.main_loop import LOG_DIR, run_guarded, run_loop
from hop.core.pipeline import Pipeline
from hop.core.reconcile import Reconciler
from hop.utils.log import log_line, setup_log_paths

ROOT = pathlib.Path(__file__).resolve().parent

def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Hoptoad tracker bot")
    parser.add_argument("--once", action="store_true", help="run one ingestion cycle and exit")
    parser.add_argument("--reconcile", action="store_true", help="run one reconciliation cycle and exit")
    parser.add_argument("--republish", metavar="TOPIC_ID", help="force-republish one post and exit")
    args = parser.parse_args(argv)

    cfg = load_config(ROOT)
    setup_log_paths(LOG_DIR)

    if args.republish:
        post = Reconciler(cfg).republish_by_id(args.republish)
        if post is None:
            log_line(f"REPUBLISH | post {args.republish} not in feed", "WARN")
            return 1
        return 0

    if args.once or args.reconcile:
        ok = True
        if args.once:
            ok = run_guarded("INGEST", Pipeline(cfg).run_cycle) is not None and ok
        if args.reconcile:
            ok = run_guarded("RECONCILE", Reconciler(cfg).run_cycle) is not None and ok
        return 0 if ok else 1

    run_loop(cfg)
    return 0

if __name__ == "__main__":
    sys.exit(main())
