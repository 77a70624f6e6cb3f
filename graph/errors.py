"""
errors.py — Error kinds shared by the graph and the engine
===========================================================
Every error here is a contract violation reported synchronously to the
caller.  Nothing is retried: there is no I/O underneath.

    InvalidReference   – a node / edge id that the graph doesn't have
    InvalidState       – operation called in the wrong run phase
    AlgorithmExhausted – internal consistency guard tripped
"""


class GraphError(Exception):
    """Base class for everything the graph / engine raise on purpose."""


class InvalidReference(GraphError, LookupError):
    def __init__(self, kind: str, ref):
        self.kind = kind
        self.ref = ref
        super().__init__(f"Unknown {kind}: {ref!r}")


class InvalidState(GraphError):
    pass


class AlgorithmExhausted(GraphError):
    pass
