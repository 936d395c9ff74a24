#!/usr/bin/env python3
import sys
import os

print("Running preflight import check...")
try:
    os.environ.setdefault("REDIS_URL", "redis://localhost:6379/0")

    import bgv.main
    print("Import bgv.main: OK")

    import bgv.queue.jobs
    print("Import bgv.queue.jobs: OK")

    from bgv.core.status_codes import validate_registry
    validate_registry()
    print("Status registry: OK")

    print("Preflight check passed.")
    sys.exit(0)
except Exception as e:
    print(f"Preflight check FAILED: {e}")
    import traceback
    traceback.print_exc()
    sys.exit(1)
