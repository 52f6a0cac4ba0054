"""Economy and progression core (pure, UI/storage independent)."""

API_VERSION = "core-v1-tap-tycoon"
