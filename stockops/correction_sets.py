# stockops/correction_sets.py
"""
Named, replayable correction sets.

Each set is plain data run by the generic engines in
stockops.services.stock_corrector. A set's name is what ends up in the
activity log, so once a set has been applied in production it should not be
edited; add a new one instead.
"""
import json
from pathlib import Path
from typing import Dict, List, Union

from stockops.schemas.corrections import StockCorrection, StockCountEntry

# PO-0052 was received in full but the GRN only booked part of it.
PO_0052_PURCHASE_ORDER_ID = 52

PO_0052_CORRECTIONS: List[StockCorrection] = [
    StockCorrection(
        item_id=18,
        name="PREGABALIN M",
        label="pregabalin",
        delta=2500,
        purchase_order_id=PO_0052_PURCHASE_ORDER_ID,
        target_received_quantity=2500,
    ),
    StockCorrection(
        item_id=26,
        name="WINAM 1",
        label="winam",
        delta=1000,
        purchase_order_id=PO_0052_PURCHASE_ORDER_ID,
        target_received_quantity=1000,
    ),
]

# Physical count as of 1 March 2026
STOCK_COUNT_2026_03_01: List[StockCountEntry] = [
    StockCountEntry(item_id=item_id, name=name, counted_stock=counted)
    for item_id, name, counted in [
        (1, "Addnok N 0.4 mg", 0),
        (38, "Addnok N 0.4 mg (Batch 2)", 5485),
        (2, "Addnok N 2 mg", 14388),
        (7, "AFTIN", 504),
        (8, "AMITRI-10", 130),
        (5, "Ari-Rok N", 1679),
        (4, "Boquit Plus", 17918),
        (3, "Buset Plus", 0),
        (14, "CLONIDINE 0.1 MG TAB", 0),
        (31, "Cyptor syrup", 10),
        (9, "DIVSHOR-ER-250", 0),
        (10, "DONAKEM-M", 140),
        (30, "EMEGA-4G", 186),
        (11, "ESCTOLPRAM-10", 194),
        (12, "ESCTOLPRAM-20", 118),
        (13, "Ewin 0.5", 391),
        (23, "ISPRO 2", 100),
        (28, "Laxwin", 10),
        (15, "NEPZ-2", 0),
        (32, "NEPZ-2 (Batch 2)", 984),
        (16, "OJOPINE 10", 0),
        (17, "PILO-20", 69),
        (41, "PREGABALIN M (Batch 2)", 0),
        (18, "PREGABALIN M", 0),
        (19, "PROXY -CR 25", 319),
        (21, "S-DEPWIN PLUS", 312),
        (20, "SANTROL-50", 166),
        (35, "Spastin SR 20", 95),
        (36, "Syotin-20", 100),
        (42, "Tapyad 100 MG (Batch 2)", 35),
        (6, "Tapyad 100 MG", 0),
        (29, "V-QUIT 100", 550),
        (24, "V-QUIT 50", 1057),
        (40, "VCLOD (Batch 2)", 0),
        (37, "VCLOD", 379),
        (25, "WILCID DSR", 120),
        (34, "WILLRICH-P", 1991),
        (33, "WINAC INJ", 16),
        (26, "WINAM 1", 845),
        (39, "WINAM 2", 895),
        (27, "WINAM-0.5", 626),
        (22, "WINFORCE-D", 103),
    ]
]

CORRECTION_SETS: Dict[str, List[StockCorrection]] = {
    "po-0052": PO_0052_CORRECTIONS,
}

STOCK_COUNTS: Dict[str, List[StockCountEntry]] = {
    "stock-count-2026-03-01": STOCK_COUNT_2026_03_01,
}


def get_correction_set(name: str) -> List[StockCorrection]:
    try:
        return CORRECTION_SETS[name]
    except KeyError:
        raise KeyError(f"Unknown correction set: {name}") from None


def load_corrections_file(path: Union[str, Path]) -> List[StockCorrection]:
    """
    Load corrections from a JSON file holding a list of records such as
    {"item_id": 18, "delta": 2500, "purchase_order_id": 52,
     "target_received_quantity": 2500}.
    """
    raw = json.loads(Path(path).read_text())
    if isinstance(raw, dict):
        raw = raw.get("corrections", [])
    return [StockCorrection.model_validate(record) for record in raw]
