"""A tiny proof-of-work blockchain served over HTTP."""

from __future__ import annotations

import argparse
import hashlib
import json
import logging
import os
import pprint
import sys
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from dotenv import load_dotenv
from flask import Flask, Response, request

logger = logging.getLogger(__name__)

DIFFICULTY = 1


@dataclass
class Block:
    """One block of the chain."""

    index: int = 0
    timestamp: str = ""
    data: int = 0
    hash: str = ""
    prev_hash: str = ""
    difficulty: int = 0
    nonce: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON form of the block."""
        return {
            "Index": self.index,
            "Timestamp": self.timestamp,
            "Data": self.data,
            "Hash": self.hash,
            "PrevHash": self.prev_hash,
            "Difficulty": self.difficulty,
            "Nonce": self.nonce,
        }


def calculate_hash(block: Block) -> str:
    """SHA-256 of the block's index, timestamp, data, previous hash and nonce."""
    record = f"{block.index}{block.timestamp}{block.data}{block.prev_hash}{block.nonce}"
    return hashlib.sha256(record.encode("utf-8")).hexdigest()


def is_hash_valid(hash_: str, difficulty: int) -> bool:
    """Whether ``hash_`` starts with ``difficulty`` zeros."""
    return hash_.startswith("0" * difficulty)


def is_block_valid(new_block: Block, old_block: Block) -> bool:
    """Whether ``new_block`` correctly follows ``old_block``."""
    return (
        old_block.index + 1 == new_block.index
        and old_block.hash == new_block.prev_hash
        and calculate_hash(new_block) == new_block.hash
    )


def _now() -> str:
    return str(datetime.now().astimezone())


def generate_block(
    old_block: Block, data: int, sleep: Callable[[float], Any] | None = None
) -> Block:
    """Mine the block that follows ``old_block``, pausing a second after each failed nonce."""
    if sleep is None:
        sleep = time.sleep
    block = Block(
        index=old_block.index + 1,
        timestamp=_now(),
        data=data,
        prev_hash=old_block.hash,
        difficulty=DIFFICULTY,
    )
    attempt = 0
    while True:
        block.nonce = format(attempt, "x")
        digest = calculate_hash(block)
        if is_hash_valid(digest, block.difficulty):
            print(digest, "work done!")
            block.hash = digest
            return block
        print(digest, "do more work!")
        sleep(1)
        attempt += 1


def genesis_block() -> Block:
    """The first block; its hash is that of an empty block."""
    return Block(
        index=0,
        timestamp=_now(),
        data=0,
        hash=calculate_hash(Block()),
        prev_hash="",
        difficulty=DIFFICULTY,
        nonce="",
    )


class _BadMessage(ValueError):
    pass


def _message_data(body: bytes) -> int:
    try:
        message = json.loads(body)
    except ValueError as err:
        raise _BadMessage(str(err)) from err
    if message is None:
        return 0
    if not isinstance(message, dict):
        raise _BadMessage("message must be an object")
    if "Data" in message:
        value = message["Data"]
    else:
        value = next((v for k, v in message.items() if k.lower() == "data"), None)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise _BadMessage("Data must be an integer")
    return value


def create_app(chain: list[Block] | None = None) -> Flask:
    """Build the HTTP application serving ``chain`` (a fresh one with a genesis block by default)."""
    if chain is None:
        genesis = genesis_block()
        pprint.pprint(genesis)
        chain = [genesis]
    lock = threading.Lock()
    app = Flask(__name__)

    @app.get("/")
    def get_blockchain() -> Response:
        with lock:
            body = json.dumps([block.to_dict() for block in chain], indent=2)
        return Response(body, mimetype="text/plain")

    @app.post("/")
    def write_block() -> Response:
        try:
            data = _message_data(request.get_data())
        except _BadMessage:
            return Response("{}", status=400, mimetype="application/json")

        with lock:
            last = chain[-1]
            new_block = generate_block(last, data)
            if is_block_valid(new_block, last):
                chain.append(new_block)
                pprint.pprint(chain)

        return Response(
            json.dumps(new_block.to_dict(), indent=2), status=201, mimetype="application/json"
        )

    return app


def main(argv: list[str] | None = None) -> int:
    """Load ``.env`` and serve the chain on the port named by ``PORT``."""
    parser = argparse.ArgumentParser(description="Proof-of-work blockchain server.")
    parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO)

    if not os.path.isfile(".env"):
        logger.error("failed to load .env file: .env not found")
        return 1
    load_dotenv(".env")

    port = os.environ.get("PORT", "")
    logger.info("HTTP server is running on port: %s", port)
    app = create_app()
    app.run(host="0.0.0.0", port=int(port) if port else 0)
    return 0


if __name__ == "__main__":
    sys.exit(main())