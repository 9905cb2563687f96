"""Channel adapter registry.

Uses the in-memory fake by default; a real pub/sub relay can be plugged in
with `set_channel` at application start-up.
"""

PUSH = "push"

_channel_instances: dict[str, object] = {}


def get_channel(channel_type: str = PUSH):
    """Return the configured channel adapter (singleton per channel type)."""
    if channel_type not in _channel_instances:
        if channel_type == PUSH:
            from preparedness.notifications.channel.fake_push import FakePushAdapter

            _channel_instances[channel_type] = FakePushAdapter()
        else:
            raise ValueError(f"Unknown channel type: {channel_type}")

    return _channel_instances[channel_type]


def set_channel(channel_type: str, adapter) -> None:
    _channel_instances[channel_type] = adapter


def reset_channels():
    """Reset all channel singletons (useful for testing)."""
    _channel_instances.clear()
