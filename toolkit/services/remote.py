# toolkit/services/remote.py
import logging
from typing import Any, Optional, Tuple

import httpx
from fastapi.encoders import jsonable_encoder

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


async def push_json_to_remote(
    uri: str, data: Any, client: Optional[httpx.AsyncClient] = None
) -> Tuple[httpx.Response, int]:
    """
    POST `data` as JSON to `uri` and return (response, status_code).
    A caller-supplied client is reused (and left open); transport errors propagate.
    """
    payload = jsonable_encoder(data)
    headers = {"Content-Type": "application/json"}

    if client is None:
        async with httpx.AsyncClient(timeout=DEFAULT_TIMEOUT) as own_client:
            response = await own_client.post(uri, json=payload, headers=headers)
    else:
        response = await client.post(uri, json=payload, headers=headers)

    logger.debug(f"JSON gepusht naar {uri}: HTTP {response.status_code}")
    return response, response.status_code
