"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters must satisfy.
Core code depends ONLY on these protocols — never on concrete
implementations — preserving the dependency inversion principle.
"""

from __future__ import annotations

from typing import Any, Protocol

from qmp_shell.core.models import Command, QmpEvent


class Monitor(Protocol):
    """Contract for QMP monitor connections.

    Any object that implements these methods with the correct
    signatures satisfies this protocol structurally (no explicit
    inheritance required).
    """

    def run(self, command: Command) -> Any:
        """Send *command* and block until its reply arrives.

        Returns the decoded ``return`` member of the reply.

        Implementations must map all socket and decoding exceptions to
        :class:`~qmp_shell.exceptions.TransportError` subclasses.

        Raises
        ------
        QmpCommandError
            When QEMU answers with an ``error`` object.
        TransportTimeoutError
            When no reply arrives within the monitor timeout.
        ConnectionFailedError
            When the connection is lost.
        """
        ...  # pragma: no cover

    def find_events(self, since: int) -> list[QmpEvent]:
        """Return buffered events whose timestamp seconds are >= *since*.

        Implementations collect any events that arrived since the last
        call without blocking.
        """
        ...  # pragma: no cover

    def close(self) -> None:
        """Release the connection.  Safe to call more than once."""
        ...  # pragma: no cover
