"""
depbump cdn - Refresh CDN URLs.
"""

from depbump.api.directory import refresh_cdn_urls
from depbump.commands.common import build_client, ensure_credentials
from depbump.lib.config import ConfigStore


def cmd_cdn(args, store: ConfigStore) -> int:
    urls = [u.strip() for u in args.urls if u.strip()]
    if not urls:
        print("ERROR: No URLs given")
        return 1

    config = ensure_credentials(store, store.load())
    with build_client(store, config) as client:
        result = refresh_cdn_urls(client, config.endpoints, urls)
    print(f"Requested refresh of {len(urls)} URL(s)")
    if result:
        print(result)
    return 0
