#!/usr/bin/env python3
"""
Print a container page from a running containerdash backend as plain text.

Usage:
    python scripts/show_container.py [NAME] [--api URL] [--json]

NAME is a container path such as /docker/web (default: the root container).
"""

import argparse
import sys
import json
import urllib.request
import urllib.error

API_BASE = "http://localhost:8000"


def api_request(api_base: str, endpoint: str) -> dict:
    """Make a GET request and return the JSON response."""
    url = f"{api_base}{endpoint}"
    req = urllib.request.Request(url, headers={"Accept": "application/json"}, method="GET")

    try:
        with urllib.request.urlopen(req, timeout=30) as response:
            return json.loads(response.read().decode("utf-8"))
    except urllib.error.HTTPError as e:
        error_body = e.read().decode("utf-8")
        try:
            error_json = json.loads(error_body)
            detail = error_json.get("detail", error_body)
        except json.JSONDecodeError:
            detail = error_body
        print(f"Error {e.code}: {detail}")
        sys.exit(1)
    except urllib.error.URLError as e:
        print(f"Connection error: {e.reason}")
        print(f"Make sure the backend is running at {api_base}")
        sys.exit(1)


def render_mask(core_mask: list[bool]) -> str:
    return " ".join(f"[{i}]" if active else f" {i} " for i, active in enumerate(core_mask))


def print_page(page: dict) -> None:
    print(" > ".join(crumb["text"] for crumb in page["parent_containers"]))
    print(f"Container: {page['display_name']} ({page['container_name']})")

    if page["subcontainers"]:
        print("Subcontainers:")
        for sub in page["subcontainers"]:
            print(f"  - {sub['text']}  {sub['link']}")

    if not page["resources_available"]:
        print("No resource isolation for this container")
        return

    metrics = page["metrics"]
    if metrics.get("cpu"):
        cpu = metrics["cpu"]
        print(f"CPU: {cpu['shares']} shares, limit {cpu['cores']} cores")
        print(f"  Cores: {render_mask(cpu['core_mask'])}")
    if metrics.get("memory"):
        mem = metrics["memory"]
        limit = f"{mem['limit']['value']} {mem['limit']['unit']}".strip()
        print(f"Memory: {mem['usage_mb']} MB used of {limit} ({mem['usage_percent']}%)")
        print(f"  Hot: {mem['hot_percent']}%  Cold: {mem['cold_percent']}%")
    for fs in metrics.get("filesystems", []):
        print(
            f"Filesystem {fs['device']}: {fs['usage']['value']} {fs['usage']['unit']} / "
            f"{fs['limit']['value']} {fs['limit']['unit']} ({fs['usage_percent']}%)"
        )
    if metrics.get("network"):
        net = metrics["network"]
        print(f"Network: RX {net['rx_bytes']} bytes, TX {net['tx_bytes']} bytes")


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Show a container page from containerdash",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument("name", nargs="?", default="/", help="Container path (default: /)")
    parser.add_argument("--api", default=API_BASE, help=f"Backend base URL (default: {API_BASE})")
    parser.add_argument("--json", action="store_true", help="Print the raw page payload")

    args = parser.parse_args()

    page = api_request(args.api.rstrip("/"), f"/containers/{args.name.strip('/')}")
    if args.json:
        print(json.dumps(page, indent=2))
    else:
        print_page(page)


if __name__ == "__main__":
    main()
