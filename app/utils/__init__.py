from app.utils.catalog import InventoryCatalog, InventoryRecord
from app.utils.matching import rank_matches, build_match_result

__all__ = ["InventoryCatalog", "InventoryRecord", "rank_matches", "build_match_result"]
