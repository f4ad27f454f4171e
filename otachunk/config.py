import argparse
from typing import List, Optional

import bittensor as bt

from otachunk.constants import DEFAULT_FILE_BLOCK_SIZE, DEFAULT_FILE_CHUNK_SIZE


def read_config(args: Optional[List[str]] = None) -> bt.Config:
    parser = argparse.ArgumentParser(
        description="Inspect how an image is split into OTA transfer chunks"
    )
    bt.logging.add_args(parser)

    parser.add_argument(
        "--file.path",
        type=str,
        help="Image to partition",
        default=None,
    )

    parser.add_argument(
        "--chunker.block_size",
        type=int,
        help="Requested block size, bytes",
        default=DEFAULT_FILE_BLOCK_SIZE,
    )

    parser.add_argument(
        "--chunker.chunk_size",
        type=int,
        help="Requested chunk size (usually the negotiated link MTU), bytes",
        default=DEFAULT_FILE_CHUNK_SIZE,
    )

    parser.add_argument(
        "--chunker.manifest_out",
        type=str,
        help="Write the packed partition manifest to this path",
        default=None,
    )

    parser.add_argument(
        "--chunker.manifest",
        action="store_true",
        help="Write the manifest next to the image as <image>.manifest",
        default=False,
    )

    return bt.Config(parser, args=args)
