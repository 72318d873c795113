# models/restock_input.py
import math
from numbers import Number

from spk.errors import ValidationError
from spk.feature_deriver import RAW_COLUMNS, DERIVED_COLUMNS, derive_restock_matrix, raw_frame, to_alternatives

# Label field pada form input (urutan = RAW_COLUMNS)
CRITERIA_NAMES = [
    "Tingkat Urgensi",
    "Stok Saat Ini",
    "Stok yang Dibutuhkan",
    "Waktu Pengiriman",
    "Tingkat Kelangkaan",
    "Harga",
    "Kualitas (Grade)",
    "Layanan Service & Garansi",
]

DERIVED_NAMES = [
    "Urgensi",
    "Pasokan",
    "Waktu Pengiriman (%)",
    "Kelangkaan",
    "Harga",
    "Kualitas",
    "Layanan",
]

# Bobot & jenis kriteria untuk 7 kriteria turunan (urutan = DERIVED_COLUMNS)
WEIGHTS = [0.3, 0.25, 0.2, 0.2, 0.07, 0.05, 0.03]
CRITERIA_TYPE = ["benefit", "benefit", "cost", "cost", "cost", "benefit", "benefit"]

DEFAULT_ALTERNATIVE_COUNT = 4


def blank_form(count=DEFAULT_ALTERNATIVE_COUNT):
    """Form kosong: nama kosong dan semua field bernilai 0."""
    return [{"name": "", "criteria": [0] * len(RAW_COLUMNS)} for _ in range(count)]


def _is_number(value):
    # bool adalah subclass int, tapi bukan input angka yang sah
    if isinstance(value, bool) or not isinstance(value, Number):
        return False
    return math.isfinite(value)


def validate_alternatives(alternatives):
    """
    Validasi form sebelum perhitungan.
    Melempar ValidationError dengan pesan untuk user; tidak ada yang dihitung.
    """
    if not isinstance(alternatives, list) or not alternatives:
        raise ValidationError("Minimal harus ada satu alternatif.")

    for alt in alternatives:
        if not isinstance(alt, dict):
            raise ValidationError("Format alternatif tidak valid.")
        name = alt.get("name")
        if not isinstance(name, str) or not name.strip():
            raise ValidationError("Semua alternatif harus memiliki nama.")
        criteria = alt.get("criteria")
        if (
            not isinstance(criteria, list)
            or len(criteria) != len(RAW_COLUMNS)
            or not all(_is_number(v) for v in criteria)
        ):
            raise ValidationError("Semua nilai kriteria harus diisi dan berupa angka.")

    return [{"name": alt["name"].strip(), "criteria": list(alt["criteria"])} for alt in alternatives]


def prepare_restock(alternatives, delivery_percentage=True):
    """
    Validasi + turunkan kriteria.
    Output: (DataFrame kriteria turunan, list alternatif siap TOPSIS).
    """
    clean = validate_alternatives(alternatives)
    derived_df = derive_restock_matrix(raw_frame(clean), delivery_percentage=delivery_percentage)
    return derived_df, to_alternatives(derived_df)


def describe_criteria():
    return {
        "raw_fields": [
            {"key": key, "label": label} for key, label in zip(RAW_COLUMNS, CRITERIA_NAMES)
        ],
        "criteria": [
            {"key": key, "label": label, "weight": w, "type": t}
            for key, label, w, t in zip(DERIVED_COLUMNS, DERIVED_NAMES, WEIGHTS, CRITERIA_TYPE)
        ],
        "default_form": blank_form(),
    }
