#!/usr/bin/env python3
"""
Main entry point for the forecast bot
"""

from forecastbot.main import run

if __name__ == "__main__":
    run()
