import pandas as pd
import pytest
from app.utils.catalog import InventoryCatalog, InventoryRecord


ROWS = [
    {
        "SKU": "BC-001", "Year": "2019", "Brand": "Toyota", "Model": "Vios", "Variant": "1.3 E",
        "Transmission": "Automatic", "Fuel Type": "Gasoline", "Body Type": "Sedan", "Color": "White",
        "Mileage": "45,000", "SRP": "₱498,000", "All-In": "98,000", "City": "Quezon City",
        "Province": "Metro Manila", "Price Status": "Drop", "Updated At": "2025-01-10",
        "image_1": "https://img/1.jpg", "image_2": "", "image_3": "https://img/3.jpg",
        "drive_link": "https://drive/1", "video_link": "",
    },
    {
        "SKU": "", "Year": "2020", "Brand": "Honda", "Model": "City", "Variant": "",
        "Transmission": "Manual", "Fuel Type": "Gasoline", "Body Type": "Sedan", "Color": "Red",
        "Mileage": "30000", "SRP": "600000", "All-In": "120000", "City": "Makati",
        "Province": "Metro Manila", "Price Status": "", "Updated At": "",
        "image_1": "", "image_2": "", "image_3": "", "drive_link": "", "video_link": "",
    },
    {
        "SKU": "BC-002", "Year": "n/a", "Brand": "Mitsubishi", "Model": "Xpander", "Variant": "GLS",
        "Transmission": "Automatic", "Fuel Type": "Gasoline", "Body Type": "MPV", "Color": "Gray",
        "Mileage": "", "SRP": "850000", "All-In": "TBA", "City": "Cebu City",
        "Province": "Cebu", "Price Status": "", "Updated At": "",
        "image_1": "", "image_2": "", "image_3": "", "drive_link": "", "video_link": "",
    },
    {
        "SKU": "BC-001", "Year": "2015", "Brand": "Duplicate", "Model": "Row", "Variant": "",
        "Transmission": "Manual", "Fuel Type": "", "Body Type": "Sedan", "Color": "",
        "Mileage": "1", "SRP": "1", "All-In": "1", "City": "", "Province": "",
        "Price Status": "", "Updated At": "",
        "image_1": "", "image_2": "", "image_3": "", "drive_link": "", "video_link": "",
    },
]


@pytest.fixture
def inventory_csv(tmp_path):
    path = tmp_path / "inventory.csv"
    pd.DataFrame(ROWS).to_csv(path, index=False)
    return path


def test_rows_are_coerced(inventory_csv):
    catalog = InventoryCatalog(source=str(inventory_csv))
    vehicles = {v.sku: v for v in catalog.get_all_vehicles()}

    vios = vehicles["BC-001"]
    assert vios.year == 2019
    assert vios.mileage == 45_000
    assert vios.srp == 498_000
    assert vios.all_in == 98_000
    assert vios.body_type == "Sedan"
    assert vios.fuel_type == "Gasoline"
    assert vios.price_status == "Drop"
    assert vios.images == ("https://img/1.jpg", "https://img/3.jpg")
    assert vios.drive_link == "https://drive/1"


def test_non_numeric_cells_become_none(inventory_csv):
    catalog = InventoryCatalog(source=str(inventory_csv))
    xpander = {v.sku: v for v in catalog.get_all_vehicles()}["BC-002"]
    assert xpander.year is None
    assert xpander.mileage is None
    assert xpander.all_in is None
    assert xpander.srp == 850_000


def test_blank_and_duplicate_skus_are_skipped(inventory_csv):
    catalog = InventoryCatalog(source=str(inventory_csv))
    vehicles = catalog.get_all_vehicles()
    assert [v.sku for v in vehicles] == ["BC-001", "BC-002"]
    assert vehicles[0].brand == "Toyota"


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        InventoryCatalog(source=str(tmp_path / "nope.csv"))


def test_sheet_without_sku_column_is_rejected(tmp_path):
    path = tmp_path / "bad.csv"
    pd.DataFrame([{"brand": "Toyota", "model": "Vios"}]).to_csv(path, index=False)
    with pytest.raises(ValueError):
        InventoryCatalog(source=str(path))


def test_failed_reload_keeps_previous_snapshot(inventory_csv):
    catalog = InventoryCatalog(source=str(inventory_csv))
    inventory_csv.unlink()
    assert catalog.reload() == 2
    assert len(catalog.get_all_vehicles()) == 2


def test_reload_picks_up_changes(inventory_csv):
    catalog = InventoryCatalog(source=str(inventory_csv))
    pd.DataFrame(ROWS[:1]).to_csv(inventory_csv, index=False)
    assert catalog.reload() == 1


def test_snapshot_is_a_copy():
    catalog = InventoryCatalog(records=[InventoryRecord(sku="X")])
    snapshot = catalog.get_all_vehicles()
    snapshot.clear()
    assert len(catalog.get_all_vehicles()) == 1
