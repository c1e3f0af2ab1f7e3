"""Runtime: fan-out/fan-in engine and logging configuration."""
