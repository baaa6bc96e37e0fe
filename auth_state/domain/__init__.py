"""Domain model: authorization state, storage protocol, expiry and events."""
