"""Accessors for the `[custom]` section of domain.toml."""

from protean.utils.globals import current_domain

_DEFAULTS = {
    "recommended_categories": ["food", "water", "medicine", "energy", "tools"],
    "expiring_soon_days": 30,
    "default_sender_name": "Community member",
}


def custom_setting(name):
    custom = current_domain.config.get("custom") or {}
    return custom.get(name, _DEFAULTS[name])
