import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "data/config.json"

DEFAULT_WEIGHTS = {
    "specialization": 0.40,
    "beds": 0.20,
    "doctors": 0.15,
    "distance": 0.15,
    "blood": 0.10,
}

DEFAULT_ROUTING = {
    "timeout_s": 10.0,
    "max_workers": 8,
    "base_url": "https://api.mapbox.com/directions/v5/mapbox/driving",
}

# Bengaluru, titik tengah demo peta
DEFAULT_CENTER = (77.5946, 12.9716)


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Memuat konfigurasi JSON yang berisi bobot skor, pengaturan routing, dan sumber direktori RS.

    Kalau CONFIG_PATH di-set (atau path diberikan) tapi file tidak ada → lempar error yang jelas.
    Kalau file default tidak ada → pakai default bawaan.
    """
    explicit = path or os.getenv("CONFIG_PATH")
    config_path = Path(explicit or DEFAULT_CONFIG_PATH)

    if not config_path.exists():
        if explicit:
            raise FileNotFoundError(f"Config file not found at {config_path.resolve()}")
        logger.info("config %s tidak ada, memakai default", config_path)
        return {}

    with config_path.open("r", encoding="utf-8") as f:
        data: Dict[str, Any] = json.load(f)

    return data


def extract_weights(config: Optional[Dict[str, Any]]) -> Dict[str, float]:
    weights_cfg = (config or {}).get("weights", {}) or {}
    return {k: float(weights_cfg.get(k, v)) for k, v in DEFAULT_WEIGHTS.items()}


def extract_routing(config: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    routing_cfg = (config or {}).get("routing", {}) or {}
    return {
        "timeout_s": float(routing_cfg.get("timeout_s", DEFAULT_ROUTING["timeout_s"])),
        "max_workers": max(1, int(routing_cfg.get("max_workers", DEFAULT_ROUTING["max_workers"]))),
        "base_url": str(routing_cfg.get("base_url", DEFAULT_ROUTING["base_url"])).rstrip("/"),
    }


def extract_directory(config: Optional[Dict[str, Any]]) -> Tuple[str, Tuple[float, float]]:
    """
    Return (source, center). source: seed | database
    """
    directory_cfg = (config or {}).get("directory", {}) or {}
    source = str(directory_cfg.get("source", "seed")).lower()
    center = directory_cfg.get("center") or DEFAULT_CENTER
    return source, (float(center[0]), float(center[1]))
