"""
Periodization policy: deload scheduling and block/week bookkeeping.

Blocks are 1-indexed; with the default frequency of 4, blocks 1, 5, 9, ...
are deload blocks, during which training volume is forced to Low.
"""

import re
from typing import Any

from .config import DELOAD_FREQUENCY, WEEKS_PER_BLOCK, VolumeLevel
from .models import BlockPosition
from .validation import finite_number


def _block_index(block_number: Any) -> int | None:
    """Return block_number as a positive int, or None if it is not one."""
    value = finite_number(block_number)
    if value is None or value <= 0 or value != int(value):
        return None
    return int(value)


def is_deload_time(block_number: Any, frequency: Any = DELOAD_FREQUENCY) -> bool:
    """
    Decide whether a block is a deload block.

    (block − 1) mod frequency == 0, i.e. the first block of every cycle.

    Args:
        block_number: 1-indexed block counter
        frequency: Blocks per deload cycle; 0 disables deloads

    Returns:
        True on deload blocks, False otherwise or for invalid input
    """
    block = _block_index(block_number)
    freq = _block_index(frequency)
    if block is None or freq is None:
        return False
    return (block - 1) % freq == 0


def effective_volume_level(
    volume_level: VolumeLevel,
    block_number: Any,
    frequency: Any = DELOAD_FREQUENCY,
) -> VolumeLevel:
    """Configured volume level, overridden to Low on deload blocks."""
    if is_deload_time(block_number, frequency):
        return "Low"
    return volume_level


def parse_block_number(label: str) -> int:
    """
    Extract the block number from a label such as "Week 5".

    Returns:
        The first integer in the label, or 0 if there is none
    """
    if not isinstance(label, str):
        return 0
    match = re.search(r"(\d+)", label)
    return int(match.group(1)) if match else 0


def advance_week(
    position: BlockPosition,
    weeks_per_block: int = WEEKS_PER_BLOCK,
) -> BlockPosition:
    """
    Move to the next training week.

    After weeks_per_block weeks the week counter wraps to 1 and the block
    counter advances.
    """
    week = position.week + 1
    block = position.block
    if week > max(1, weeks_per_block):
        week = 1
        block += 1
    return BlockPosition(block=block, week=week)
