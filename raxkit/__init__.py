"""Load balancing, bootstopping, binary I/O and logging for phylogenetic inference."""

__version__ = "1.0.2"

__all__ = [
    "types",
    "log",
    "binary_stream",
    "partition_assignment",
    "load_balancer",
    "coarse_load_balancer",
    "bootstop",
]