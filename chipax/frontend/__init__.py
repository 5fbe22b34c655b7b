"""Desktop frontends for the emulator."""
