# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from rich.console import Console
from rich.panel import Panel

USAGE = """Usage:
  workperf --iterations <n> --concurrency <n> --backend <framework|net10> --protocol <rest|grpc> --payload <bytes>
  workperf --durationSeconds <n> --warmupSeconds <n> --concurrency <n> --backend <framework|net10> --protocol <rest|grpc> --payload <bytes>"""


def print_usage(console: Console | None = None) -> None:
    (console or Console(stderr=True)).print(USAGE, highlight=False, markup=False)


def print_error(message: str, title: str = "Error", console: Console | None = None) -> None:
    (console or Console(stderr=True)).print(
        Panel(message, title=title, border_style="red", title_align="left")
    )

