"""Per-interface event decoders."""
