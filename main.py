#!/usr/bin/env python3
"""Main entry point for the Arbigraph arbitrage detector."""
from arbigraph.app import main

if __name__ == "__main__":
    main()
