# config.py
import os


def _env_bool(name, default):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# Server
HOST = os.environ.get("TOPSIS_HOST", "127.0.0.1")
PORT = int(os.environ.get("TOPSIS_PORT", "3001"))
DEBUG = _env_bool("TOPSIS_DEBUG", False)

# Jumlah desimal skor yang dikirim ke form restock
SCORE_DECIMALS = int(os.environ.get("TOPSIS_SCORE_DECIMALS", "4"))

# Waktu pengiriman diubah ke persen lintas alternatif (False = pakai nilai mentah)
DELIVERY_PERCENTAGE = _env_bool("TOPSIS_DELIVERY_PERCENTAGE", True)
