"""Read playback status and track metadata of MPRIS players over the D-Bus session bus."""

__version__ = "0.1.0"
__all__ = ["model", "textreplace", "variant", "wire", "bus", "status", "demo"]