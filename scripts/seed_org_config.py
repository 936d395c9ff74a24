"""
Seed organization -> verification provider mappings in Redis so the menu and
provider routing pick the right method keys. Idempotent; safe in local/dev/CI.

Usage: python scripts/seed_org_config.py org-1=gridlines org-2=truthscreen
"""
import os
import sys
from redis import Redis

REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")
PREFIX = os.getenv("ORG_CONFIG_KEY_PREFIX", "org:")
PROVIDERS = {"truthscreen", "gridlines"}


def parse_pairs(argv):
    out = {}
    for arg in argv:
        org_id, sep, provider = arg.partition("=")
        provider = provider.strip().lower()
        if not sep or not org_id.strip():
            raise SystemExit(f"bad mapping (want ORG=PROVIDER): {arg}")
        if provider not in PROVIDERS:
            raise SystemExit(f"unknown provider {provider!r} for {org_id}")
        out[org_id.strip()] = provider
    return out


def main(argv=None):
    mapping = parse_pairs(sys.argv[1:] if argv is None else argv)
    r = Redis.from_url(REDIS_URL, decode_responses=True)
    for org_id, provider in mapping.items():
        r.set(f"{PREFIX}{org_id}:verification_check", provider)
    print(f"OK: wrote {len(mapping)} org provider mapping(s) into {REDIS_URL}")

if __name__ == "__main__":
    main()
