#!/usr/bin/env python3
"""
Ledger Entry Point

Starts the FastAPI server for the ledger (host and port from LEDGER_* settings).
"""

import sys

from ledger_core.api import run_server
from ledger_core.config import get_config


if __name__ == "__main__":
    config = get_config()
    print("Starting ledger API...")
    print(f"API available at: http://localhost:{config.api_port}")
    print(f"Documentation at: http://localhost:{config.api_port}/docs")
    print()

    try:
        run_server(debug=False)
    except KeyboardInterrupt:
        print("\nShutting down ledger API...")
    except Exception as e:
        print(f"Error starting server: {e}")
        sys.exit(1)
