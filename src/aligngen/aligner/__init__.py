"""Stream aligner: time-ordered merging of periodic input streams."""

from aligngen.aligner.config import (
    AlignedPortSpec,
    StreamAlignerConfig,
    StreamAlignerDeclaration,
)
from aligngen.aligner.generator import StreamAlignerGenerator, StreamSymbols, buffer_capacity

__all__ = [
    "AlignedPortSpec",
    "StreamAlignerConfig",
    "StreamAlignerDeclaration",
    "StreamAlignerGenerator",
    "StreamSymbols",
    "buffer_capacity",
]
