# spk/feature_deriver.py
import numpy as np
import pandas as pd

# Urutan field mentah dari form restock
RAW_COLUMNS = [
    "urgency",         # Tingkat Urgensi
    "stock_on_hand",   # Stok Saat Ini
    "stock_required",  # Stok yang Dibutuhkan
    "delivery_time",   # Waktu Pengiriman
    "scarcity",        # Tingkat Kelangkaan
    "price",           # Harga
    "quality",         # Kualitas (Grade)
    "service",         # Layanan Service & Garansi
]

# Urutan kriteria setelah diturunkan (yang benar-benar dihitung TOPSIS)
DERIVED_COLUMNS = [
    "urgency",
    "supply_gap",
    "delivery",
    "scarcity",
    "price",
    "quality",
    "service",
]


def supply_gap_percentage(stock_on_hand, stock_required):
    """
    Kekurangan pasokan dalam persen: (dibutuhkan - saat ini) / dibutuhkan * 100.
    Jika stok yang dibutuhkan 0, hasilnya 0.
    Bisa untuk skalar maupun kolom (numpy / pandas).
    """
    on_hand = np.asarray(stock_on_hand, dtype=float)
    required = np.asarray(stock_required, dtype=float)

    safe_required = np.where(required == 0, 1.0, required)
    gap = np.where(required == 0, 0.0, (required - on_hand) / safe_required * 100)

    if gap.ndim == 0:
        return float(gap)
    if isinstance(stock_required, pd.Series):
        return pd.Series(gap, index=stock_required.index)
    return gap


def delivery_time_percentage(delivery_times):
    """
    Waktu pengiriman dalam persen terhadap seluruh kolom:
    (max - t_i) / (max - min) * 100. Jika semua waktu sama, hasilnya 0.

    Butuh kolom lengkap dari semua alternatif, jadi jangan dipanggil per baris.
    """
    times = pd.Series(delivery_times, dtype=float)
    if times.empty:
        return times

    max_t = times.max()
    min_t = times.min()
    if max_t == min_t:
        return pd.Series(0.0, index=times.index)
    return (max_t - times) / (max_t - min_t) * 100


def raw_frame(alternatives):
    """List {name, criteria: [8 angka]} -> DataFrame mentah berindeks nama."""
    df = pd.DataFrame(
        [list(alt["criteria"]) for alt in alternatives],
        columns=RAW_COLUMNS,
        dtype=float,
    )
    df.insert(0, "name", [alt["name"] for alt in alternatives])
    return df


def derive_restock_matrix(raw_df, delivery_percentage=True):
    """
    Mengubah matriks mentah restock (8 kolom) menjadi 7 kriteria TOPSIS.

    Urutan proses:
    1. Kolom waktu pengiriman diubah ke persen memakai seluruh kolom
       (hanya setelah semua baris terkumpul).
    2. Stok saat ini & stok dibutuhkan digabung jadi persentase kekurangan pasokan.
    """
    # 1. Pass per-kolom (lintas baris)
    if delivery_percentage:
        delivery = delivery_time_percentage(raw_df["delivery_time"])
    else:
        delivery = raw_df["delivery_time"].astype(float)

    # 2. Pass per-baris
    supply_gap = supply_gap_percentage(raw_df["stock_on_hand"], raw_df["stock_required"])

    derived = pd.DataFrame({
        "urgency": raw_df["urgency"].astype(float),
        "supply_gap": supply_gap,
        "delivery": delivery,
        "scarcity": raw_df["scarcity"].astype(float),
        "price": raw_df["price"].astype(float),
        "quality": raw_df["quality"].astype(float),
        "service": raw_df["service"].astype(float),
    }, index=raw_df.index)

    if "name" in raw_df.columns:
        derived.insert(0, "name", raw_df["name"])
    return derived


def to_alternatives(derived_df):
    """DataFrame kriteria turunan -> format input run_topsis."""
    return [
        {"name": row["name"], "criteria": [float(row[c]) for c in DERIVED_COLUMNS]}
        for _, row in derived_df.iterrows()
    ]
