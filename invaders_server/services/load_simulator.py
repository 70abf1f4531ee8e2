# invaders_server/services/load_simulator.py
"""Synthetic CPU burn used for load testing. Never touches game state."""

import json
import logging
import math
import random
import string
import time

logger = logging.getLogger(__name__)

PRIME_LIMIT = 100000
STRING_ROUNDS = 1000
JSON_ITEMS = 1000


def _find_primes(limit: int) -> list:
    primes = []
    for candidate in range(2, limit + 1):
        root = math.isqrt(candidate)
        if all(candidate % divisor for divisor in range(2, root + 1)):
            primes.append(candidate)
    return primes


def simulate_server_load(prime_limit: int = PRIME_LIMIT) -> dict:
    """Burn CPU with prime search, string building and JSON round-trips."""
    start = time.perf_counter()

    primes = _find_primes(prime_limit)

    text = "".join(
        random.choice(string.ascii_lowercase + string.digits) for _ in range(STRING_ROUNDS * 6)
    )

    payload = {"data": [{"id": i, "value": random.random()} for i in range(JSON_ITEMS)]}
    decoded = json.loads(json.dumps(payload))

    mapped = [item["value"] * 2 for item in decoded["data"]]
    filtered = [value for value in mapped if value > 1]
    reduced = sum(filtered)

    duration = (time.perf_counter() - start) * 1000
    logger.info("Server load simulation completed in %.1fms", duration)

    return {
        "success": True,
        "duration": duration,
        "computations": {
            "primesFound": len(primes),
            "stringLength": len(text),
            "arrayOperations": {
                "mapped": len(mapped),
                "filtered": len(filtered),
                "reduced": reduced,
            },
        },
    }
