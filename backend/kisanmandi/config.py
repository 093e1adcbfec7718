# backend/kisanmandi/config.py
import os
from dataclasses import dataclass
from dotenv import load_dotenv
from pathlib import Path
from typing import Optional

dotenv_path = Path(__file__).parents[2] / '.env'
load_dotenv(dotenv_path)


def _optional_float(name: str) -> Optional[float]:
    raw = os.getenv(name, "").strip()
    return float(raw) if raw else None


@dataclass(frozen=True)
class Settings:
    # --- Data.gov.in (mandi) ---
    DATA_GOV_IN_API_KEY: str = os.getenv("DATA_GOV_IN_API_KEY", "")
    MANDI_API_BASE: str      = os.getenv("MANDI_API_BASE", "https://api.data.gov.in/resource")
    # Current Daily Price of Various Commodities from Various Markets (Mandi)
    MANDI_RESOURCE_ID: str   = os.getenv("MANDI_RESOURCE_ID", "9ef84268-d588-465a-a308-a864a43d0070")

    # --- Query knobs ---
    MANDI_DEFAULT_LIMIT: int = int(os.getenv("MANDI_DEFAULT_LIMIT", "50"))
    MANDI_LOOKUP_LIMIT: int  = int(os.getenv("MANDI_LOOKUP_LIMIT", "100"))

    # None means no timeout; a hung provider keeps the caller waiting
    MANDI_HTTP_TIMEOUT_SEC: Optional[float] = _optional_float("MANDI_HTTP_TIMEOUT_SEC")

    USER_AGENT: str = "KisanMandi/1.0"
    LOG_LEVEL: str  = os.getenv("LOG_LEVEL", "INFO")

settings = Settings()
