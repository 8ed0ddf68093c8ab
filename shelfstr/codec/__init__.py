from shelfstr.codec.decoder import EventDecoder
from shelfstr.codec.encoder import EventEncoder
from shelfstr.codec.stats import aggregate

__all__ = ["EventDecoder", "EventEncoder", "aggregate"]
