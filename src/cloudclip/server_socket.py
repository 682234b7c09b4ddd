#!/usr/bin/env python3
"""History socket path management for the daemon.

Before the daemon binds its history socket the path is prepared: the
parent directory is created, a socket left behind by a crashed daemon is
removed, and a socket with a live daemon behind it is refused.
"""

from __future__ import annotations

import logging
import socket
import sys
from pathlib import Path

logger = logging.getLogger(__name__)


class SocketPathError(Exception):
    """The history socket path cannot be used by this daemon."""

    pass


def daemon_is_listening(path: Path) -> bool:
    """Return True if something accepts connections on the socket at path.

    Raises:
        OSError: If the socket cannot be reached for another reason.
    """
    with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as client:
        try:
            client.connect(str(path))
        except ConnectionRefusedError:
            return False
    return True


def prepare_socket_path(socket_path: str) -> None:
    """Make socket_path ready to bind.

    Args:
        socket_path: Path the daemon will listen on.

    Raises:
        SocketPathError: If the path holds something other than a socket,
            a running daemon listens on it, or it cannot be reached.
    """
    path = Path(socket_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    if not path.exists():
        return
    if not path.is_socket():
        raise SocketPathError(f"{path} exists and is not a socket")

    try:
        listening = daemon_is_listening(path)
    except OSError as e:
        raise SocketPathError(f"Cannot access socket {path}: {e}") from e
    if listening:
        raise SocketPathError(f"Socket already in use by a running daemon: {path}")

    logger.debug("Removing stale socket %s", path)
    path.unlink()


def print_startup_message(socket_path: str, synced: bool) -> None:
    """Print daemon startup message to stderr.

    Args:
        socket_path: Path to the Unix domain socket.
        synced: Whether a remote store is configured.
    """
    print(f"Serving history on {socket_path}", file=sys.stderr)
    if not synced:
        print("Store not configured: watching the local clipboard only",
            file=sys.stderr)
    print(f"View history with: cloudclip --view --socket {socket_path}",
        file=sys.stderr)


def cleanup_socket(socket_path: str) -> None:
    """Remove the daemon's socket file if it is still there."""
    Path(socket_path).unlink(missing_ok=True)
