"""UP2 Decode - Streaming record decoder and firmware block reassembly."""
from .blocks import iter_blocks, reassemble
from .bodies import DECODERS, decode_body
from .stream import Up2Decoder, parse_up2

__all__ = ["DECODERS", "Up2Decoder", "decode_body", "iter_blocks", "parse_up2", "reassemble"]
