from typing import Optional
from app.models.dto import MatchedVehicle


def format_price(value: Optional[float]) -> str:
    if value is None:
        return "—"
    return f"₱{value:,.0f}"


def format_mileage(value: Optional[float]) -> str:
    if value is None:
        return "—"
    return f"{value:,.0f} km"


def vehicle_title(vehicle: MatchedVehicle) -> str:
    parts = [str(vehicle.year) if vehicle.year else "", vehicle.brand, vehicle.model, vehicle.variant]
    return " ".join(p for p in parts if p)


def describe_vehicle(vehicle: MatchedVehicle, payment_type: Optional[str]) -> str:
    """One-line description used in the summary prompt."""
    price = vehicle.srp if payment_type == "cash" else vehicle.all_in
    price_label = "SRP" if payment_type == "cash" else "all-in"
    return (
        f"{vehicle_title(vehicle)}, {vehicle.transmission}, {vehicle.fuel_type or 'n/a'}, "
        f"{format_mileage(vehicle.mileage)}, {vehicle.city or 'n/a'}, {price_label} {format_price(price)}"
    )


def format_vehicle_caption(vehicle: MatchedVehicle) -> str:
    """
    Caption for one result bubble.
    Both prices are shown; empty attributes are left out.
    """
    lines = [f"🚗 {vehicle_title(vehicle)}"]

    specs = [s for s in (vehicle.transmission, vehicle.fuel_type, vehicle.color) if s]
    if specs:
        lines.append(" • ".join(specs))
    if vehicle.mileage is not None:
        lines.append(f"🛣 {format_mileage(vehicle.mileage)}")

    location = ", ".join(p for p in (vehicle.city, vehicle.province) if p)
    if location:
        lines.append(f"📍 {location}")

    lines.append(f"💵 Cash (SRP): {format_price(vehicle.srp)}")
    lines.append(f"🏦 All-in: {format_price(vehicle.all_in)}")

    if vehicle.drive_link:
        lines.append(f"📁 Photos: {vehicle.drive_link}")
    if vehicle.video_link:
        lines.append(f"🎥 Video: {vehicle.video_link}")

    lines.append(f"SKU: {vehicle.sku}")
    return "\n".join(lines)
