# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""JSON export of a run result."""

from pathlib import Path

import orjson

from workperf.common.config import RunConfig
from workperf.common.models import RunResult


class JsonExporter:
    """Writes the run configuration and result to a JSON file.

    Output structure:
    {
        "config": {"concurrency": 10, "mode": {...}, "protocol": "rest", ...},
        "result": {"count": 100, "failure_count": 0, "p50_ms": ..., ...}
    }
    """

    def __init__(self, config: RunConfig, result: RunResult, file_path: Path) -> None:
        self._config = config
        self._result = result
        self._file_path = Path(file_path)

    def _generate_content(self) -> bytes:
        output = {
            "config": self._config.model_dump(mode="json"),
            "result": self._result.model_dump(mode="json"),
        }
        return orjson.dumps(output, option=orjson.OPT_INDENT_2)

    def export(self) -> Path:
        """Write the file, creating parent directories as needed. Returns the path written."""
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        self._file_path.write_bytes(self._generate_content())
        return self._file_path
