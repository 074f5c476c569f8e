"""
Supavisor DB Init - Lambda Entry Point

Deployed as the onEvent handler of the database-initialization custom
resource (handler: ``main.handler``).

Local invocation with a saved event:
    python main.py event.json
"""

import json
import sys

from dbinit.handler import lambda_handler

handler = lambda_handler


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("Usage: python main.py <event.json>", file=sys.stderr)
        sys.exit(2)

    with open(sys.argv[1], encoding="utf-8") as f:
        payload = json.load(f)

    print(json.dumps(handler(payload, None), indent=2))
