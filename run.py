"""
Root entry point for the Mood Analytics application.
Bootstraps the package and runs the command-line orchestrator.
"""

import sys
import os

# Ensure the project root is in python path
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from mood_analytics.main import main

if __name__ == "__main__":
    sys.exit(main())
