"""Fabric Gateway.

Streams correlated responses for Fabric pattern operations over
Server-Sent Events. Requests arrive on a side channel bound to an
open stream; responses come back on that stream.
"""

__version__ = "1.0.0"
