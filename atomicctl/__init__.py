"""atomicctl - provision Atomic Hosts to run the Docker engine."""

__version__ = "0.1.0"
