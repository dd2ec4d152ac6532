#!/usr/bin/env python3
"""
register_equipment.py

Purpose:
  Ensure an equipment item with a given name exists in the checkout tracker.
  - If found (same name, case-insensitive): print the record and exit 0 with status "exists".
  - If not found: create it; the server assigns the next EQnnn code.

API:
  Base: http://localhost:8089/api/v1
  Search: GET  /equipment?search=<name>        -> JSON list
  Create: POST /equipment                      -> body: {"name": "...", "category": "...", ...}
  Auth: Authorization: Bearer <access token> (chair or admin)

Token precedence:
  1) --token <value> (CLI)
  2) env EQTRACKER_TOKEN

Examples:
  register_equipment.py "Stihl Chainsaw" -c Grounds -l "Barn"
  EQTRACKER_TOKEN=... register_equipment.py "Shop Vac" -c Cleaning

Exit codes:
  0 = success (exists or created)
  1 = handled application error
  2 = network/HTTP error
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from typing import Any, Dict, Optional, Sequence

import requests

DEFAULT_BASE_URL = "http://localhost:8089/api/v1"
RESOURCE_PATH = "equipment"
TOKEN_ENV = "EQTRACKER_TOKEN"


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Ensure an equipment item exists in the tracker; create if missing.")
    p.add_argument("name", help="Equipment name (e.g., 'Stihl Chainsaw').")
    p.add_argument("-c", "--category", default="Tools", help="Category (default: Tools).")
    p.add_argument("-l", "--location", default=None, help="Where the item is stored.")
    p.add_argument("-n", "--notes", default=None, help="Free-form notes.")
    p.add_argument("--base-url", default=DEFAULT_BASE_URL, help=f"Base API URL (default: {DEFAULT_BASE_URL})")
    p.add_argument("--token", default=None, help=f"Bearer access token. Overrides env {TOKEN_ENV}.")
    p.add_argument("--timeout", type=float, default=15.0, help="HTTP timeout in seconds (default: 15)")
    p.add_argument("-v", "--verbose", action="store_true", help="Verbose logging to stderr.")
    return p.parse_args(argv)


def resolve_token(cli_token: Optional[str]) -> Optional[str]:
    return cli_token or os.getenv(TOKEN_ENV) or None


def build_headers(token: Optional[str], content_json: bool = False) -> Dict[str, str]:
    headers: Dict[str, str] = {"Accept": "application/json"}
    if content_json:
        headers["Content-Type"] = "application/json"
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def vprint(enabled: bool, *args: Any) -> None:
    if enabled:
        print(*args, file=sys.stderr)


def find_equipment_by_name(
    session: requests.Session,
    base_url: str,
    token: Optional[str],
    name: str,
    timeout: float,
    verbose: bool,
) -> Optional[Dict[str, Any]]:
    url = f"{base_url.rstrip('/')}/{RESOURCE_PATH}"
    params = {"search": name}
    vprint(verbose, f"GET {url} params={params}")
    r = session.get(url, headers=build_headers(token), params=params, timeout=timeout)
    r.raise_for_status()
    data = r.json()
    if not isinstance(data, list):
        raise ValueError(f"Expected list from GET {url}, got: {type(data).__name__}")
    wanted = name.strip().lower()
    for item in data:
        if isinstance(item, dict) and (item.get("name") or "").strip().lower() == wanted:
            return item
    return None


def create_equipment(
    session: requests.Session,
    base_url: str,
    token: Optional[str],
    payload: Dict[str, Any],
    timeout: float,
    verbose: bool,
) -> Dict[str, Any]:
    url = f"{base_url.rstrip('/')}/{RESOURCE_PATH}"
    vprint(verbose, f"POST {url} json={payload}")
    r = session.post(url, headers=build_headers(token, content_json=True), json=payload, timeout=timeout)
    if r.status_code not in (200, 201):
        try:
            detail = json.dumps(r.json(), indent=2)
        except ValueError:
            detail = r.text
        raise requests.HTTPError(f"Create failed ({r.status_code}): {detail}", response=r)
    return r.json()


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    token = resolve_token(args.token)
    if not token:
        print(f"WARNING: No access token supplied (use --token or env {TOKEN_ENV}).", file=sys.stderr)

    session = requests.Session()
    try:
        existing = find_equipment_by_name(session, args.base_url, token, args.name, args.timeout, args.verbose)
        if existing:
            print(json.dumps({"status": "exists", "name": args.name, "record": existing}, indent=2))
            return 0

        payload: Dict[str, Any] = {"name": args.name, "category": args.category}
        if args.location:
            payload["location"] = args.location
        if args.notes:
            payload["notes"] = args.notes
        created = create_equipment(session, args.base_url, token, payload, args.timeout, args.verbose)
        print(json.dumps({"status": "created", "name": args.name, "record": created}, indent=2))
        return 0

    except requests.exceptions.RequestException as e:
        print(f"NETWORK_ERROR: {e}", file=sys.stderr)
        return 2
    except ValueError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
