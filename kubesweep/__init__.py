"""kubesweep: list every readable object in a Kubernetes cluster."""

__version__ = "0.1.0"
