# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Deterministic payload generation so responses are comparable across runs."""

from dataclasses import dataclass, field
from datetime import datetime, timezone

MIN_ITEMS = 10
MAX_ITEMS = 200
BYTES_PER_ITEM = 32


@dataclass(slots=True)
class PayloadData:
    big_string: str = ""
    items: list[str] = field(default_factory=list)
    metadata: dict[str, str] = field(default_factory=dict)


def generate_payload(payload_size: int) -> PayloadData:
    """Build a payload of roughly `payload_size` bytes.

    Negative sizes are clamped to 0. The item count is `payload_size // 32`
    bounded to [10, 200]. Only `generatedAtUtc` varies between calls.
    """
    size = max(0, payload_size)
    item_count = max(MIN_ITEMS, min(MAX_ITEMS, size // BYTES_PER_ITEM))
    return PayloadData(
        big_string="x" * size,
        items=[f"item-{i}-size-{size}" for i in range(item_count)],
        metadata={
            "payloadSize": str(size),
            "items": str(item_count),
            "generatedAtUtc": datetime.now(timezone.utc).isoformat(),
        },
    )
