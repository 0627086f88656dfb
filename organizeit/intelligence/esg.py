"""ESG monitoring: carbon footprint and sustainability programme payloads.

Both payloads are fixed; each read re-persists them verbatim so the store
always holds the last figures served.
"""

from __future__ import annotations

import copy

from organizeit.store.kv import KeyValueStore

CARBON_KEY = "esg:carbon:current"
SUSTAINABILITY_KEY = "esg:sustainability:current"

_CARBON: dict = {
    "current_footprint": 42.3,
    "monthly_trend": -12,
    "breakdown": [
        {"name": "Computing", "value": 45, "emissions": 19.0, "color": "#8884d8"},
        {"name": "Storage", "value": 25, "emissions": 10.6, "color": "#82ca9d"},
        {"name": "Network", "value": 20, "emissions": 8.5, "color": "#ffc658"},
        {"name": "Other", "value": 10, "emissions": 4.2, "color": "#ff7300"},
    ],
    "renewable_percentage": 68,
    "efficiency_score": 83,
    "targets": {
        "carbon_neutral_by": "2030",
        "renewable_target": 85,
        "efficiency_target": 90,
    },
}

_SUSTAINABILITY: dict = {
    "metrics": {
        "energy_efficiency": 88,
        "water_usage_efficiency": 76,
        "waste_reduction": 92,
        "sustainable_procurement": 67,
    },
    "initiatives": [
        {
            "name": "Green Computing Program",
            "status": "Active",
            "impact": "High",
            "co2_reduction": 8.5,
            "timeline": "Q4 2024",
        },
        {
            "name": "Renewable Energy Transition",
            "status": "In Progress",
            "impact": "Very High",
            "co2_reduction": 15.2,
            "timeline": "Q2 2025",
        },
    ],
    "compliance_status": {
        "iso14001": "Certified",
        "ghg_protocol": "Compliant",
        "science_based_targets": "In Progress",
    },
}


class ESGService:
    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    def carbon(self) -> dict:
        data = copy.deepcopy(_CARBON)
        self._store.set(CARBON_KEY, data)
        return data

    def sustainability(self) -> dict:
        data = copy.deepcopy(_SUSTAINABILITY)
        self._store.set(SUSTAINABILITY_KEY, data)
        return data
