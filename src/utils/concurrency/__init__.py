"""Primitivas de concorrência compartilhadas."""

from utils.concurrency.keyed_lock import KeyedLock

__all__ = ["KeyedLock"]
