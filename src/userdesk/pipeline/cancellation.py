"""
Cancellation tokens for remote queries.
"""


class CancellationToken:
    """
    Marks one issued query as still wanted.

    The controller cancels a token as soon as newer role/age parameters are
    issued; the remote query stage checks it before delivering a result.
    """

    __slots__ = ("label", "_cancelled")

    def __init__(self, label: str = ""):
        self.label = label
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def __repr__(self) -> str:
        state = "cancelled" if self._cancelled else "active"
        return f"CancellationToken({self.label!r}, {state})"
