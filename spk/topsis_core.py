# spk/topsis_core.py
import logging
from collections import namedtuple
from enum import Enum
from numbers import Real

import numpy as np
import pandas as pd

from spk.errors import MalformedInput

logger = logging.getLogger(__name__)

# Kolom yang norm-nya 0 dibagi 1, jadi hasilnya kolom nol (bukan NaN)
ZERO_NORM_DENOMINATOR = 1.0

# Skor jika D+ dan D- sama-sama 0 (semua alternatif identik di semua kriteria)
DEGENERATE_SCORE = 0.0


class CriterionType(str, Enum):
    BENEFIT = "benefit"  # Semakin besar, semakin bagus
    COST = "cost"        # Semakin kecil, semakin bagus

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise MalformedInput(
                f"Tipe kriteria '{value}' tidak dikenali (harus 'benefit' atau 'cost')."
            ) from None


IdealVectors = namedtuple("IdealVectors", ["positive", "negative"])


def _reject_non_real(values, label):
    """String, bool, None, dll. ditolak; tidak dikonversi diam-diam ke float."""
    if isinstance(values, np.ndarray):
        valid = values.dtype.kind in "iuf"
    else:
        valid = all(
            isinstance(v, Real) and not isinstance(v, (bool, np.bool_))
            for v in values
        )
    if not valid:
        raise MalformedInput(f"Semua nilai {label} harus berupa angka.")


def _as_matrix(matrix):
    if not isinstance(matrix, np.ndarray):
        try:
            for row in matrix:
                if isinstance(row, (str, bytes)):
                    raise MalformedInput("Semua nilai kriteria harus berupa angka.")
                _reject_non_real(row, "kriteria")
        except TypeError as e:
            raise MalformedInput("Matriks keputusan harus 2 dimensi dan tidak kosong.") from e
    try:
        X = np.asarray(matrix, dtype=float)
    except (TypeError, ValueError) as e:
        raise MalformedInput("Semua nilai kriteria harus berupa angka.") from e
    if X.ndim != 2 or X.shape[0] == 0 or X.shape[1] == 0:
        raise MalformedInput("Matriks keputusan harus 2 dimensi dan tidak kosong.")
    if not np.all(np.isfinite(X)):
        raise MalformedInput("Semua nilai kriteria harus berupa angka finite.")
    return X


def _as_vector(values, length, label):
    if values is None:
        raise MalformedInput(f"{label} wajib diisi.")
    if isinstance(values, (str, bytes)):
        raise MalformedInput(f"Semua nilai {label} harus berupa angka.")
    try:
        _reject_non_real(values, label)
        v = np.asarray(values, dtype=float)
    except (TypeError, ValueError) as e:
        raise MalformedInput(f"Semua nilai {label} harus berupa angka.") from e
    if v.ndim != 1 or v.shape[0] != length:
        raise MalformedInput(
            f"Panjang {label} ({v.size}) tidak sama dengan jumlah kriteria ({length})."
        )
    return v


def parse_criteria_types(criteria_type, length):
    if isinstance(criteria_type, str) or not hasattr(criteria_type, "__len__"):
        raise MalformedInput("criteriaType harus berupa daftar 'benefit'/'cost'.")
    if len(criteria_type) != length:
        raise MalformedInput(
            f"Panjang criteriaType ({len(criteria_type)}) tidak sama dengan jumlah kriteria ({length})."
        )
    return [CriterionType.parse(t) for t in criteria_type]


# --- 1. NORMALISASI (Vector / Euclidean) ---
def normalize_matrix(matrix):
    """
    R_ij = X_ij / sqrt(sum_i X_ij^2), per kolom.

    Kolom dibagi dulu dengan max |X_ij| agar kuadratnya tidak overflow
    (nilai sangat besar) atau underflow (nilai sangat kecil).
    """
    X = _as_matrix(matrix)
    scale = np.max(np.abs(X), axis=0)
    zero_cols = scale == 0
    scale[zero_cols] = ZERO_NORM_DENOMINATOR

    S = X / scale
    norms = np.sqrt(np.sum(S ** 2, axis=0))
    # Hanya kolom yang benar-benar nol: dibagi 1, hasilnya tetap nol
    norms[zero_cols] = ZERO_NORM_DENOMINATOR
    return S / norms


# --- 2. PEMBOBOTAN ---
def weight_matrix(normalized, weights):
    R = _as_matrix(normalized)
    w = _as_vector(weights, R.shape[1], "weights")
    return R * w


# --- 3. SOLUSI IDEAL POSITIF (A+) DAN NEGATIF (A-) ---
def get_ideal_solutions(weighted, criteria_type):
    Y = _as_matrix(weighted)
    types = parse_criteria_types(criteria_type, Y.shape[1])

    A_plus = np.zeros(Y.shape[1])
    A_minus = np.zeros(Y.shape[1])

    for j, c_type in enumerate(types):
        if c_type is CriterionType.BENEFIT:
            A_plus[j] = np.max(Y[:, j])
            A_minus[j] = np.min(Y[:, j])
        else:
            A_plus[j] = np.min(Y[:, j])
            A_minus[j] = np.max(Y[:, j])

    return IdealVectors(A_plus, A_minus)


# --- 4. JARAK KE SOLUSI IDEAL ---
def calculate_distances(weighted, ideal):
    Y = _as_matrix(weighted)
    A = _as_vector(ideal, Y.shape[1], "vektor ideal")

    # Skala bersama supaya selisih & kuadratnya tidak overflow untuk bobot besar
    scale = max(np.max(np.abs(Y)), np.max(np.abs(A)))
    if scale == 0:
        return np.zeros(Y.shape[0])
    return np.sqrt(np.sum((Y / scale - A / scale) ** 2, axis=1)) * scale


# --- 5. NILAI PREFERENSI (Vi) ---
def closeness_scores(d_plus, d_minus):
    """
    Vi = D- / (D- + D+).
    Jika D+ dan D- keduanya 0, Vi = DEGENERATE_SCORE.
    """
    if d_plus is None or d_minus is None:
        raise MalformedInput("Vektor jarak D+ dan D- wajib diisi.")
    d_plus = np.asarray(d_plus, dtype=float)
    d_minus = np.asarray(d_minus, dtype=float)
    if d_plus.ndim != 1 or d_plus.size == 0:
        raise MalformedInput("Vektor jarak tidak boleh kosong.")
    if d_plus.shape != d_minus.shape:
        raise MalformedInput(
            f"Panjang D+ ({d_plus.size}) dan D- ({d_minus.size}) tidak sama."
        )

    if not (np.all(np.isfinite(d_plus)) and np.all(np.isfinite(d_minus))):
        raise MalformedInput("Jarak ke solusi ideal tidak finite (bobot terlalu besar).")
    if np.any(d_plus < 0) or np.any(d_minus < 0):
        raise MalformedInput("Jarak ke solusi ideal tidak boleh negatif.")

    # Dibagi jarak terbesar per baris agar D- + D+ tidak overflow
    m = np.maximum(d_plus, d_minus)
    degenerate = m == 0
    if degenerate.any():
        logger.debug("%d alternatif berjarak 0 ke kedua solusi ideal", int(degenerate.sum()))

    safe_m = np.where(degenerate, 1.0, m)
    dp = d_plus / safe_m
    dm = d_minus / safe_m
    scores = np.full(d_plus.shape, DEGENERATE_SCORE)
    np.divide(dm, dm + dp, out=scores, where=~degenerate)
    return np.clip(scores, 0.0, 1.0)


# --- 6. PERANGKINGAN ---
def rank_scores(names, d_plus, d_minus):
    """
    Menyusun DataFrame hasil (name, d_plus, d_minus, score, rank),
    diurutkan dari skor tertinggi. Urutan alternatif yang skornya sama
    tetap seperti urutan input. Index = posisi alternatif di input.
    """
    if names is None:
        raise MalformedInput("Nama alternatif wajib diisi.")
    scores = closeness_scores(d_plus, d_minus)
    if len(names) != scores.size:
        raise MalformedInput(
            f"Jumlah nama ({len(names)}) tidak sama dengan jumlah skor ({scores.size})."
        )

    df = pd.DataFrame({
        "name": list(names),
        "d_plus": np.asarray(d_plus, dtype=float),
        "d_minus": np.asarray(d_minus, dtype=float),
        "score": scores,
    })
    df["rank"] = df["score"].rank(ascending=False, method="min").astype(int)
    return df.sort_values(by="score", ascending=False, kind="mergesort")


def _split_alternatives(alternatives):
    if not alternatives:
        raise MalformedInput("Minimal harus ada satu alternatif.")
    names, rows = [], []
    for alt in alternatives:
        name = alt.get("name") if isinstance(alt, dict) else None
        if not isinstance(name, str) or not name.strip():
            raise MalformedInput("Setiap alternatif harus memiliki nama.")
        criteria = alt.get("criteria")
        if criteria is None or isinstance(criteria, (str, bytes)):
            raise MalformedInput(f"Alternatif '{name}' tidak memiliki daftar kriteria.")
        try:
            rows.append(list(criteria))
        except TypeError as e:
            raise MalformedInput(f"Alternatif '{name}' tidak memiliki daftar kriteria.") from e
        names.append(name)

    width = len(rows[0])
    if any(len(r) != width for r in rows):
        raise MalformedInput("Semua alternatif harus memiliki jumlah kriteria yang sama.")
    return names, _as_matrix(rows)


def run_topsis(alternatives, weights, criteria_type):
    """
    Menerapkan metode TOPSIS secara lengkap.

    Input : alternatives = [{"name": str, "criteria": [K angka]}],
            weights = [K angka >= 0], criteria_type = ["benefit"|"cost"] * K
    Output: DataFrame (name, d_plus, d_minus, score, rank) urut skor menurun.
    """
    names, X = _split_alternatives(alternatives)
    k = X.shape[1]

    w = _as_vector(weights, k, "weights")
    if not np.all(np.isfinite(w)) or np.any(w < 0):
        raise MalformedInput("Bobot harus berupa angka finite dan tidak negatif.")
    types = parse_criteria_types(criteria_type, k)

    R = normalize_matrix(X)
    Y = weight_matrix(R, w)
    ideal = get_ideal_solutions(Y, types)

    D_plus = calculate_distances(Y, ideal.positive)
    D_minus = calculate_distances(Y, ideal.negative)

    logger.debug("TOPSIS: %d alternatif x %d kriteria", len(names), k)
    return rank_scores(names, D_plus, D_minus)


def rank(alternatives, weights, criteria_type):
    """Kontrak utama: list {name, score} urut skor menurun."""
    df = run_topsis(alternatives, weights, criteria_type)
    return [
        {"name": name, "score": float(score)}
        for name, score in zip(df["name"], df["score"])
    ]
