"""Tiny demo for AHA search internals (no MCP runtime required).

Run:
  python demo_search.py "heart attack"
"""

import sys

from aha_config import get_settings
from aha_resources import load_resources
from aha_search import rank_resources


def main() -> None:
    query = " ".join(sys.argv[1:]) or "heart attack"
    resources = load_resources(get_settings().resources_path)

    print(f"Ranked resources for {query!r}:")
    for match in rank_resources(query, resources):
        print(f"  {match.score:>4}  {match.resource.id}  {match.resource.title}")


if __name__ == "__main__":
    main()
