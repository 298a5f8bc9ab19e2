"""Output precompression for podsite."""

from podsite.compress.compressor import (
    BROTLI_SUFFIX,
    BrotliCompressor,
    CompressionReport,
    FileStats,
)

__all__ = [
    "BROTLI_SUFFIX",
    "BrotliCompressor",
    "CompressionReport",
    "FileStats",
]
