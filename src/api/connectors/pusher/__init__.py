"""Conector Pusher Channels (eventos de depósito por organização)."""

from .client import PusherClient, decode_frame, encode_frame

__all__ = ["PusherClient", "decode_frame", "encode_frame"]
