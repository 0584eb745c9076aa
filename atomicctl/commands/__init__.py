"""Command groups for the atomicctl CLI."""
from . import provision, render, service, upgrade

__all__ = ['provision', 'render', 'service', 'upgrade']
