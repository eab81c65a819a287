"""Object listing for kubesweep."""

from kubesweep.listing.enumerator import list_objects, to_record

__all__ = ["list_objects", "to_record"]
