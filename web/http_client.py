# web/http_client.py
import asyncio
import struct
from typing import Any, Dict, Optional, Tuple

import requests

from config import HTTP_TIMEOUT, HTTP_USER_AGENT

_HEADERS = {"User-Agent": HTTP_USER_AGENT, "Accept": "application/json"}
_PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


def fetch_json(url: str, params: Optional[Dict[str, Any]] = None, timeout: float = HTTP_TIMEOUT) -> Any:
    """GET 요청 후 JSON 본문을 반환합니다.

    2xx가 아니면 requests.HTTPError, 본문이 JSON이 아니면 ValueError가 발생합니다.
    """
    # 요청마다 새 연결 (to_thread 작업 스레드 간에 Session을 공유하지 않음)
    resp = requests.get(url, params=params, headers=_HEADERS, timeout=timeout)
    resp.raise_for_status()
    return resp.json()


def read_png_size(header: bytes) -> Optional[Tuple[int, int]]:
    """PNG 앞부분(24바이트)의 IHDR에서 (width, height)를 읽습니다. PNG가 아니면 None."""
    if len(header) < 24 or not header.startswith(_PNG_SIGNATURE) or header[12:16] != b"IHDR":
        return None
    width, height = struct.unpack(">II", header[16:24])
    if not width or not height:
        return None
    return width, height


def fetch_image_size(url: str, timeout: float = HTTP_TIMEOUT) -> Optional[Tuple[int, int]]:
    """이미지 전체를 받지 않고 PNG 헤더만 읽어 크기를 구합니다."""
    with requests.get(url, headers={"User-Agent": HTTP_USER_AGENT}, timeout=timeout, stream=True) as resp:
        resp.raise_for_status()
        return read_png_size(resp.raw.read(24))


async def fetch_json_async(url: str, params: Optional[Dict[str, Any]] = None,
                           timeout: float = HTTP_TIMEOUT) -> Any:
    """fetch_json을 별도 스레드에서 실행해 이벤트 루프를 막지 않습니다."""
    return await asyncio.to_thread(fetch_json, url, params, timeout)


async def fetch_image_size_async(url: str, timeout: float = HTTP_TIMEOUT) -> Optional[Tuple[int, int]]:
    return await asyncio.to_thread(fetch_image_size, url, timeout)
