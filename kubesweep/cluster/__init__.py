"""Cluster access for kubesweep.

Submodules
----------
connection -- ClusterClient ABC, the kubernetes-asyncio ClusterConnection,
              and load_connection() for kubeconfig/in-cluster credentials.
"""

from kubesweep.cluster.connection import ClusterClient, ClusterConnection, load_connection

__all__ = ["ClusterClient", "ClusterConnection", "load_connection"]
