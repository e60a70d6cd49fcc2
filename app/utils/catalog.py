import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

import pandas as pd
from loguru import logger

from app.config import Settings


MAX_IMAGES = 10


@dataclass(frozen=True)
class InventoryRecord:
    """One unit from the inventory sheet."""
    sku: str
    year: Optional[int] = None
    brand: str = ""
    model: str = ""
    variant: str = ""
    transmission: str = ""
    fuel_type: str = ""
    body_type: str = ""
    color: str = ""
    mileage: Optional[float] = None
    city: str = ""
    province: str = ""
    price_status: str = ""
    updated_at: str = ""
    srp: Optional[float] = None     # cash price
    all_in: Optional[float] = None  # financing all-in
    images: Tuple[str, ...] = ()
    drive_link: str = ""
    video_link: str = ""


class InventoryCatalog:
    """
    Catalog snapshot loaded from the published inventory CSV.
    Raw sheet text is coerced here so the match engine only sees typed rows.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        source: Optional[str] = None,
        records: Optional[Iterable[InventoryRecord]] = None,
    ):
        self._vehicles: List[InventoryRecord] = []

        if records is not None:
            self.source = source or "<memory>"
            self._vehicles = list(records)
            return

        if source is None:
            if settings is None:
                settings = Settings()
            source = settings.INVENTORY_CSV_URL or settings.INVENTORY_CSV_PATH

        self.source = source
        self._vehicles = self._load(source)
        logger.info(f"✅ Loaded {len(self._vehicles)} vehicles from inventory")

    def _load(self, source: str) -> List[InventoryRecord]:
        if not _is_url(source):
            path = Path(source)
            logger.info(f"🔍 Looking for inventory file at: {path.absolute()}")
            if not path.exists():
                logger.error(f"❌ Inventory file not found: {path.absolute()}")
                raise FileNotFoundError(f"Inventory file not found: {path.absolute()}")
        else:
            logger.info(f"🔍 Fetching inventory CSV from {source}")

        df = pd.read_csv(source, dtype=str, keep_default_na=False)
        return self._parse_frame(df)

    def _parse_frame(self, df: pd.DataFrame) -> List[InventoryRecord]:
        df = df.rename(columns=_normalize_header)
        if "sku" not in df.columns:
            raise ValueError(f"Inventory has no SKU column (columns: {list(df.columns)})")

        vehicles = []
        seen = set()
        for idx, row in df.iterrows():
            sku = _text(row.get("sku"))
            if not sku:
                logger.warning(f"⚠️  Skipping row {idx}: empty SKU")
                continue
            if sku in seen:
                logger.warning(f"⚠️  Skipping row {idx}: duplicate SKU {sku}")
                continue
            seen.add(sku)

            images = tuple(
                url for url in (_text(row.get(f"image_{i}")) for i in range(1, MAX_IMAGES + 1)) if url
            )
            year = _parse_number(row.get("year"))

            vehicles.append(InventoryRecord(
                sku=sku,
                year=int(year) if year is not None else None,
                brand=_text(row.get("brand")),
                model=_text(row.get("model")),
                variant=_text(row.get("variant")),
                transmission=_text(row.get("transmission")),
                fuel_type=_text(row.get("fuel_type")),
                body_type=_text(row.get("body_type")),
                color=_text(row.get("color")),
                mileage=_parse_number(row.get("mileage")),
                city=_text(row.get("city")),
                province=_text(row.get("province")),
                price_status=_text(row.get("price_status")),
                updated_at=_text(row.get("updated_at")),
                srp=_parse_number(row.get("srp")),
                all_in=_parse_number(row.get("all_in")),
                images=images,
                drive_link=_text(row.get("drive_link")),
                video_link=_text(row.get("video_link")),
            ))
        return vehicles

    def reload(self) -> int:
        """Re-read the source. On failure the previous snapshot stays in place."""
        if self.source == "<memory>":
            return len(self._vehicles)
        try:
            vehicles = self._load(self.source)
        except Exception as e:
            logger.error(f"❌ Inventory refresh failed, keeping {len(self._vehicles)} vehicles: {type(e).__name__}: {e}")
            return len(self._vehicles)

        self._vehicles = vehicles
        logger.info(f"🔄 Inventory refreshed: {len(vehicles)} vehicles")
        return len(vehicles)

    def get_all_vehicles(self) -> List[InventoryRecord]:
        return self._vehicles.copy()


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def _normalize_header(name) -> str:
    """'SKU' -> 'sku', 'Fuel Type' -> 'fuel_type', 'All-In' -> 'all_in'."""
    return re.sub(r"[\s\-]+", "_", str(name).strip().lower())


def _text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and pd.isna(value):
        return ""
    return str(value).strip()


def _parse_number(value) -> Optional[float]:
    """'₱1,234,000' -> 1234000.0; blanks and junk -> None."""
    text = _text(value)
    if not text:
        return None
    cleaned = re.sub(r"[₱,\s]|php|km", "", text.lower())
    try:
        number = float(cleaned)
    except ValueError:
        return None
    if pd.isna(number):
        return None
    return number
