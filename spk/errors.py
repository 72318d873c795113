# spk/errors.py


class TopsisError(ValueError):
    """Base error untuk seluruh pipeline SPK."""


class MalformedInput(TopsisError):
    """
    Dilempar oleh core: panjang vektor tidak cocok, tipe kriteria tidak dikenal,
    alternatif kosong, atau nilai yang tidak finite.
    """


class ValidationError(TopsisError):
    """Dilempar oleh form input (nama kosong, field bukan angka, jumlah field salah)."""
