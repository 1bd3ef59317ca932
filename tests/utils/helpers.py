"""
Test Helpers
============

Helper functions for common testing operations.
"""

import asyncio
import json
import time
from pathlib import Path
from typing import Any, Callable, Dict

import yaml


async def wait_for_condition(
    condition: Callable[[], bool],
    timeout: float = 2.0,
    interval: float = 0.01,
    error_message: str = "Condition not met within timeout",
) -> None:
    """Wait for a condition to become true."""
    start_time = time.time()

    while time.time() - start_time < timeout:
        if condition():
            return
        await asyncio.sleep(interval)

    raise TimeoutError(error_message)


def write_payload(directory: Path, name: str, payload: Dict[str, Any]) -> Path:
    """Write a payload as JSON or YAML depending on the file extension."""
    path = directory / name
    if path.suffix in (".yaml", ".yml"):
        path.write_text(yaml.safe_dump(payload, sort_keys=False), encoding="utf-8")
    else:
        path.write_text(json.dumps(payload), encoding="utf-8")
    return path
