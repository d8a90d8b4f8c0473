"""
EVM-compatible chains (Ethereum, BSC, Polygon, Avalanche, Arbitrum, ...).

Issues a single JSON-RPC eth_call over HTTP POST:
  {"jsonrpc":"2.0","method":"eth_call",
   "params":[{"to":<address>,"data":"0x<call data>"},"latest"],"id":1}

The deadline covers connect, headers and body. The exchange runs on a
one-shot worker thread and the caller waits at most the remaining budget;
when it runs out the response is closed and DeadlineReached is raised, even
if the endpoint is still trickling bytes.
"""

from __future__ import annotations

import json
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from typing import Iterable, List

import requests

from ..core.errors import DeadlineReached, MalformedEnvelope, TransportError
from .envelope import decode_hex, extract_hex_result

logger = logging.getLogger(__name__)

JSON_HEADERS = {"Content-Type": "application/json"}
READ_CHUNK_BYTES = 8192


def build_eth_call_body(address: str, call_data: bytes) -> str:
    """Serialize the eth_call request exactly as sent on the wire."""
    payload = {
        "jsonrpc": "2.0",
        "method": "eth_call",
        "params": [{"to": address, "data": "0x" + call_data.hex()}, "latest"],
        "id": 1,
    }
    return json.dumps(payload, separators=(",", ":"))


def _read_body(chunks: Iterable[bytes], deadline: float) -> bytes:
    buf = bytearray()
    for chunk in chunks:
        if time.monotonic() > deadline:
            raise DeadlineReached("deadline reached while reading response body")
        if chunk:
            buf.extend(chunk)
    return bytes(buf)


def _post_and_read(
    rpc_url: str,
    body: str,
    timeout_s: float,
    deadline: float,
    opened: List[requests.Response],
) -> bytes:
    """POST the call and read the whole body. Runs on the worker thread."""
    resp = requests.post(
        rpc_url,
        data=body,
        headers=JSON_HEADERS,
        timeout=timeout_s,
        stream=True,
    )
    opened.append(resp)
    with resp:
        if resp.status_code != 200:
            logger.debug("eth_call %s -> HTTP %s", rpc_url, resp.status_code)
            raise TransportError(f"{rpc_url}: HTTP {resp.status_code}", status_code=resp.status_code)
        if time.monotonic() > deadline:
            raise DeadlineReached("deadline reached before reading response body")
        return _read_body(resp.iter_content(chunk_size=READ_CHUNK_BYTES), deadline)


class EvmChain:
    """eth_call transport for any EVM JSON-RPC endpoint."""

    @property
    def chain_name(self) -> str:
        return "evm"

    def call_contract(
        self,
        rpc_url: str,
        address: str,
        call_data: bytes,
        timeout_ms: int,
    ) -> bytes:
        body = build_eth_call_body(address, call_data)
        timeout_s = timeout_ms / 1000.0
        deadline = time.monotonic() + timeout_s
        opened: List[requests.Response] = []

        pool = ThreadPoolExecutor(max_workers=1, thread_name_prefix="eth-call")
        try:
            future = pool.submit(_post_and_read, rpc_url, body, timeout_s, deadline, opened)
            try:
                raw = future.result(timeout=max(0.0, deadline - time.monotonic()))
            except FutureTimeout:
                # unblocks the worker's pending read
                for resp in opened:
                    resp.close()
                logger.debug("eth_call %s abandoned after %d ms", rpc_url, timeout_ms)
                raise DeadlineReached(f"{rpc_url}: no complete response within {timeout_ms} ms") from None
            except requests.Timeout as exc:
                raise DeadlineReached(f"{rpc_url}: no response within {timeout_ms} ms") from exc
            except requests.RequestException as exc:
                # requests surfaces a read timeout mid-body as ConnectionError
                if time.monotonic() >= deadline:
                    raise DeadlineReached(f"{rpc_url}: body not received within {timeout_ms} ms") from exc
                raise TransportError(f"{rpc_url}: {type(exc).__name__}: {exc}") from exc
        finally:
            pool.shutdown(wait=False)

        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MalformedEnvelope(f"{rpc_url}: response body is not UTF-8") from exc

        hex_data = extract_hex_result(text)
        try:
            return decode_hex(hex_data)
        except MalformedEnvelope:
            logger.error("Failed to decode hex data: %s", hex_data[:200])
            raise


__all__ = ["EvmChain", "build_eth_call_body", "JSON_HEADERS"]
