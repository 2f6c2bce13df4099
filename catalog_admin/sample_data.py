"""Sample catalog used by ``flask seed`` and the mock data source."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Dict, List, Tuple

from .records import CategoryRecord


# (name, description, parent name, sort order)
SAMPLE_CATEGORIES: List[Tuple[str, str, str | None, int]] = [
    ("Home Improvement", "Tools and materials for home improvement projects", None, 1),
    ("Plumbing", "Plumbing tools, fixtures, and accessories", None, 2),
    ("Electrical", "Electrical tools, components, and safety equipment", None, 3),
    ("HVAC", "Heating, ventilation, and air conditioning equipment", None, 4),
    ("Cleaning", "Cleaning supplies and equipment", None, 5),
    ("Garden & Outdoor", "Garden tools, outdoor equipment, and landscaping supplies", None, 6),
    ("Security", "Home security systems and safety equipment", None, 7),
    ("Furniture", "Home and office furniture", None, 8),
    ("Pipes & Fittings", "PVC, copper, and other pipe materials and fittings", "Plumbing", 1),
    ("Faucets & Fixtures", "Bathroom and kitchen faucets, showerheads, and fixtures", "Plumbing", 2),
    ("Toilets & Bidets", "Toilets, bidets, and related accessories", "Plumbing", 3),
    ("Water Heaters", "Tank and tankless water heaters", "Plumbing", 4),
    ("Wiring & Cables", "Electrical wires, cables, and conduits", "Electrical", 1),
    ("Switches & Outlets", "Light switches, outlets, and electrical boxes", "Electrical", 2),
    ("Lighting", "LED lights, fixtures, and lighting accessories", "Electrical", 3),
    ("Circuit Breakers", "Circuit breakers, fuses, and electrical panels", "Electrical", 4),
    ("Air Conditioners", "Window, portable, and central air conditioning units", "HVAC", 1),
    ("Heaters", "Space heaters, radiators, and heating systems", "HVAC", 2),
    ("Fans & Ventilation", "Ceiling fans, exhaust fans, and ventilation systems", "HVAC", 3),
    ("Thermostats", "Smart and programmable thermostats", "HVAC", 4),
    ("Cleaning Supplies", "Detergents, disinfectants, and cleaning solutions", "Cleaning", 1),
    ("Cleaning Tools", "Brooms, mops, sponges, and cleaning accessories", "Cleaning", 2),
    ("Vacuum Cleaners", "Upright, canister, and robotic vacuum cleaners", "Cleaning", 3),
    ("Air Purifiers", "Air purifiers and air quality improvement devices", "Cleaning", 4),
]

# (product name, category name)
SAMPLE_PRODUCTS: List[Tuple[str, str]] = [
    ("Professional Pipe Wrench Set", "Plumbing"),
    ("Smart Touchless Faucet", "Faucets & Fixtures"),
    ("High-Efficiency Toilet", "Toilets & Bidets"),
    ("Tankless Water Heater", "Water Heaters"),
    ("LED Recessed Light Kit", "Lighting"),
    ("Smart Electrical Outlet", "Switches & Outlets"),
    ("Circuit Breaker Panel", "Circuit Breakers"),
    ("Smart Thermostat", "Thermostats"),
    ("Portable Air Conditioner", "Air Conditioners"),
    ("Ceiling Fan with Light", "Fans & Ventilation"),
    ("Robot Vacuum Cleaner", "Vacuum Cleaners"),
    ("HEPA Air Purifier", "Air Purifiers"),
    ("Professional Cleaning Kit", "Cleaning Tools"),
    ("Smart Garden Irrigation System", "Garden & Outdoor"),
    ("Professional Hedge Trimmer", "Garden & Outdoor"),
]


def build_sample_records(now: datetime | None = None) -> Tuple[List[CategoryRecord], Dict[int, int]]:
    """Return sample categories with sequential ids plus their product counts."""

    now = now or datetime.utcnow()
    ids_by_name: Dict[str, int] = {}
    records: List[CategoryRecord] = []
    for index, (name, description, parent_name, sort_order) in enumerate(SAMPLE_CATEGORIES, start=1):
        ids_by_name[name] = index
        created_at = now - timedelta(days=len(SAMPLE_CATEGORIES) - index)
        records.append(
            CategoryRecord(
                id=index,
                name=name,
                description=description,
                parent_id=ids_by_name[parent_name] if parent_name else None,
                sort_order=sort_order,
                created_at=created_at,
                updated_at=created_at,
            )
        )

    product_counts: Dict[int, int] = {}
    for _, category_name in SAMPLE_PRODUCTS:
        category_id = ids_by_name[category_name]
        product_counts[category_id] = product_counts.get(category_id, 0) + 1
    return records, product_counts
