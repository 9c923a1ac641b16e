"""
Configuration loader.
Reads settings from .env file and makes them available to the rest of the app.
"""

import os
from dotenv import load_dotenv

load_dotenv()

# Storage: one SQLite file holds every durable slot
DATA_DIR = os.getenv(
    "DAYMARK_DATA_DIR",
    os.path.join(os.path.dirname(os.path.dirname(__file__)), "data"),
)
DATABASE_FILE = os.getenv("DAYMARK_DATABASE_FILE", "daymark.db")

# Name of the slot the score ledger is persisted under
SLOT_NAME = os.getenv("DAYMARK_SLOT", "daymark_scores")

# Dashboard settings
ANNUAL_TARGET = int(os.getenv("DAYMARK_ANNUAL_TARGET", "40"))
DEFAULT_SKIN = os.getenv("DAYMARK_SKIN", "nexus")
