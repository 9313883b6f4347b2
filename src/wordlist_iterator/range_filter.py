"""Line-index window filtering over batches."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, AsyncIterator

if TYPE_CHECKING:
    from .flow import FlowController


def batch_window(
    first_index: int, length: int, start: float, end: float
) -> range | None:
    """Local indexes of a batch that fall inside [start, end).

    Args:
        first_index: Global index of the batch's first line
        length: Number of lines in the batch
        start: First global index wanted
        end: Global index to stop before (may be inf)

    Returns:
        range over positions within the batch, or None when the batch
        contributes no lines
    """
    last_index = first_index + length - 1
    if length == 0 or last_index < start or first_index >= end:
        return None

    local_start = max(0, int(start) - first_index)
    if math.isinf(end):
        local_end = length - 1
    else:
        local_end = min(length - 1, int(end) - first_index - 1)

    if local_end < local_start:
        return None
    return range(local_start, local_end + 1)


def window_passed(first_index: int, length: int, end: float) -> bool:
    """True once a batch reaches global index end - 1."""
    return first_index + length >= end


async def filter_batches(
    flow: "FlowController", start: float = 0, end: float = math.inf
) -> AsyncIterator[tuple[int, str]]:
    """Yield (global_index, line) for every line inside [start, end).

    Pulls batches from the flow controller one at a time. Batches entirely
    before start still advance the index; iteration stops after the batch
    holding index end - 1, or after the final batch. In that last batch the
    flow is closed before its last selected line is yielded, so the file is
    already released when the consumer receives it.
    """
    while True:
        batch = await flow.next_batch()
        done = batch.final or window_passed(batch.first_index, len(batch), end)
        window = batch_window(batch.first_index, len(batch), start, end)
        if window is not None:
            for local in window:
                if done and local == window[-1]:
                    await flow.aclose()
                yield batch.first_index + local, batch.lines[local]

        if done:
            return
