#!/usr/bin/env python
"""
Persistent runner for the streakmap service.
Keeps uvicorn running even if it crashes.
"""
import os
import subprocess
import sys
import time


def main() -> None:
    port = os.getenv("PORT", "8000")
    while True:
        print(f"\n[INFO] Starting streakmap on port {port}...")
        try:
            subprocess.run([sys.executable, "-m", "uvicorn", "streakmap.main:app", "--port", port], check=False)
        except KeyboardInterrupt:
            print("\n[INFO] Shutting down streakmap...")
            break

        print("[INFO] Server stopped, will restart in 2 seconds...")
        time.sleep(2)


if __name__ == "__main__":
    main()
