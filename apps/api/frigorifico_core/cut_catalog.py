from __future__ import annotations

from datetime import datetime, timedelta
from decimal import Decimal
from types import MappingProxyType

DEFAULT_PRICE = Decimal("29.90")
DEFAULT_CATEGORY = "Padrão"

SHELF_LIFE = timedelta(days=30)
FINAL_STORAGE_TEMPERATURE = Decimal("-5")

# BRL per kg
PRICES = MappingProxyType({
    "picanha": Decimal("79.90"),
    "contrafile": Decimal("49.90"),
    "alcatra": Decimal("45.90"),
    "filemignon": Decimal("89.90"),
    "maminha": Decimal("55.90"),
    "costela": Decimal("35.90"),
    "acem": Decimal("29.90"),
    "patinho": Decimal("39.90"),
    "cupim": Decimal("42.90"),
    "embutido_frescal": Decimal("32.90"),
    "embutido_defumado": Decimal("45.90"),
    "embutido_cozido": Decimal("39.90"),
})

CATEGORIES = MappingProxyType({
    "picanha": "Premium",
    "filemignon": "Premium",
    "contrafile": "Extra",
    "maminha": "Extra",
    "alcatra": "Extra",
    "cupim": "Extra",
    "costela": "Padrão",
    "acem": "Padrão",
    "patinho": "Padrão",
    "embutido_frescal": "Embutidos",
    "embutido_defumado": "Embutidos",
    "embutido_cozido": "Embutidos",
})

EMBUTIDO_TYPES = ("frescal", "defumado", "cozido")


def price_for(tipo: str) -> Decimal:
    return PRICES.get(tipo, DEFAULT_PRICE)


def category_for(tipo: str) -> str:
    return CATEGORIES.get(tipo, DEFAULT_CATEGORY)


def embutido_tipo(kind: str) -> str:
    """Map a sausage kind (frescal, defumado, cozido) to its cut tipo key."""
    if kind not in EMBUTIDO_TYPES:
        raise ValueError(f"Unknown embutido kind: {kind}")
    return f"embutido_{kind}"


def final_item_code(tipo: str, corte_id: int) -> str:
    """PIC-007 style code: first three letters of the cut tipo + padded cut id."""
    prefix = tipo[:3].upper()
    return f"{prefix}-{corte_id:03d}"


def expiry_from(at: datetime) -> datetime:
    return at + SHELF_LIFE
