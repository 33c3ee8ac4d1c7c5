# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""REST transport: `POST {base_url}/api/work` with a JSON body."""

import aiohttp
import orjson

from workperf.common.constants import WORK_API_PATH
from workperf.common.environment import Environment


class RestTransport:
    """Owns one pooled aiohttp session shared by all workers."""

    def __init__(self) -> None:
        self._session: aiohttp.ClientSession | None = None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=Environment.DRIVER.HTTP_TIMEOUT),
                connector=aiohttp.TCPConnector(
                    limit=Environment.DRIVER.HTTP_CONNECTION_LIMIT
                ),
            )
        return self._session

    async def send(
        self,
        base_url: str,
        payload_size: int,
        correlation_id: str,
        headers: dict[str, str],
    ) -> int:
        """Send one work request and read the full response body.

        Returns:
            Size of the response body in bytes.

        Raises:
            aiohttp.ClientResponseError: On a non-2xx status.
            aiohttp.ClientError: On connection or protocol errors.
        """
        body = orjson.dumps({"payloadSize": payload_size, "correlationId": correlation_id})
        headers["Content-Type"] = "application/json"
        url = f"{base_url.rstrip('/')}{WORK_API_PATH}"
        async with self._get_session().post(url, data=body, headers=headers) as response:
            response.raise_for_status()
            content = await response.read()
        return len(content)

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None
