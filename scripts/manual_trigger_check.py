"""
Manually fire one check against a running API, the way the cron caller does.

    python scripts/manual_trigger_check.py missed
    python scripts/manual_trigger_check.py immediate --base-url http://0.0.0.0:8000
"""

import argparse

import requests

from med_reminder.utils.settings import CRON_SECRET

ENDPOINTS = {
    "missed": "/api/check-medications",
    "immediate": "/api/send-reminders",
}


def run():
    parser = argparse.ArgumentParser()
    parser.add_argument("mode", choices=sorted(ENDPOINTS))
    parser.add_argument("--base-url", default="http://127.0.0.1:8000")
    args = parser.parse_args()

    response = requests.post(
        f"{args.base_url}{ENDPOINTS[args.mode]}",
        headers={"x-cron-token": CRON_SECRET or ""},
        timeout=30,
    )

    if response.ok:
        print(f"✅ [{args.mode}] {response.json()}")
    else:
        print(f"❌ [{args.mode}] {response.status_code} {response.text}")


if __name__ == "__main__":
    run()
