#!/usr/bin/env python3
"""Entry point for the PassportFrame GUI."""

import logging
import os
import sys

HERE = os.path.dirname(os.path.abspath(__file__))
if HERE not in sys.path:
    sys.path.insert(0, HERE)

from passportframe.app.logging_setup import configure_logging
from passportframe.ui.main_window import run

if __name__ == "__main__":
    configure_logging(logging.INFO)
    run()
