from typing import Any

# Departure airports allowed for search (Germany, Austria, Switzerland)
DACH_IATA = frozenset({
    # DE
    "BER", "BRE", "CGN", "DTM", "DRS", "DUS", "FRA", "HHN", "FDH", "HAM",
    "HAJ", "FKB", "LEJ", "FMM", "MUC", "FMO", "NUE", "PAD", "STR", "NRN",
    # AT
    "GRZ", "INN", "KLU", "LNZ", "SZG", "VIE",
    # CH
    "BSL", "BRN", "GVA", "LUG", "SIR", "ACH", "ZRH",
})


def normalize_code(value: Any) -> str:
    """Uppercase and cut to three characters. Shorter input is passed through."""
    return str(value).upper()[:3]


def is_allowed_origin(code: str) -> bool:
    return code in DACH_IATA
