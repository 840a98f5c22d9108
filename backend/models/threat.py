"""
Threat level model for competitive intelligence reports
"""

from enum import Enum


class ThreatLevel(str, Enum):
    """Qualitative threat rating derived from market signal analysis"""

    def __new__(cls, value, description):
        obj = str.__new__(cls, value)
        obj._value_ = value
        obj.description = description
        return obj

    low = (
        "Low",
        "No significant competitive pressure detected, or no analysis available",
    )
    medium = (
        "Medium",
        "Moderate competitive pressure - monitor and prepare responses",
    )
    high = (
        "High",
        "Significant or major competitive pressure - act on recommended strategies",
    )
