"""Support utilities shared across pixelkit."""
