"""Value types shared by the price sources and the resolver.

Everything here is immutable and lives for a single resolution call.
"""

__all__ = [
    "currency",
    "prices",
]
