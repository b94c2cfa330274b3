"""Centralised server settings (dotenv + env overrides)."""
from __future__ import annotations
import os
from pathlib import Path
from dotenv import load_dotenv

ROOT = Path(__file__).parents[1]
load_dotenv(ROOT / ".env", override=False)

class settings:                            # pylint: disable=too-few-public-methods
    PORT_CONFIGS     = os.getenv("NODEBOT_PORT_CONFIGS", "portConfigs.json")
    CLIENT_ROOT      = os.getenv("NODEBOT_CLIENT_ROOT", os.path.join("..", "NodeBot_Client"))
    HOST             = os.getenv("NODEBOT_HOST", "0.0.0.0")
    PORT             = int(os.getenv("NODEBOT_PORT", 2016))
    OPEN_DELAY       = float(os.getenv("NODEBOT_OPEN_DELAY", 0.1))
    READ_TIMEOUT     = float(os.getenv("NODEBOT_READ_TIMEOUT", 0.1))
    LOG_LEVEL        = os.getenv("LOG_LEVEL", "INFO").upper()
