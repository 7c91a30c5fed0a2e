"""Application layer: identifier service, ports, and the upload/delivery/deletion use cases."""
