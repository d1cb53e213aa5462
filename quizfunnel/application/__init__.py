"""Application layer: service orchestrators over the boundary and core layers."""
