"""OpenAI-compatible batch inference provider."""

import json
import logging

import openai
from openai import AsyncOpenAI

from docbundle.application.ports import BatchOutcome, BatchRequest, BatchState, BatchStatus
from docbundle.domain.exceptions import ProviderRejected, ProviderUnavailable

logger = logging.getLogger(__name__)

CHAT_COMPLETIONS = "/v1/chat/completions"

_ENDED = {"completed", "expired", "cancelled"}
_FAILED = {"failed"}


def _translate(e: openai.OpenAIError, action: str) -> Exception:
    if isinstance(e, (openai.APIConnectionError, openai.RateLimitError, openai.InternalServerError)):
        return ProviderUnavailable(f"{action} failed: {e}")
    return ProviderRejected(f"{action} rejected: {e}")


def encode_requests(requests: list[BatchRequest]) -> bytes:
    """One JSONL line per request in the provider's batch input format."""
    lines = [
        json.dumps(
            {
                "custom_id": r.custom_id,
                "method": "POST",
                "url": CHAT_COMPLETIONS,
                "body": {
                    "model": r.model,
                    "max_tokens": r.max_tokens,
                    "temperature": r.temperature,
                    "messages": [{"role": "user", "content": r.prompt}],
                },
            }
        )
        for r in requests
    ]
    return ("\n".join(lines) + "\n").encode("utf-8")


def _parse_line(record: dict) -> BatchOutcome:
    custom_id = record.get("custom_id", "")
    error = record.get("error")
    response = record.get("response") or {}
    body = response.get("body") or {}
    if error:
        return BatchOutcome(custom_id=custom_id, success=False, error=error.get("message") or str(error))
    if response.get("status_code") != 200:
        message = (body.get("error") or {}).get("message") or f"HTTP {response.get('status_code')}"
        return BatchOutcome(custom_id=custom_id, success=False, error=message)
    choices = body.get("choices") or []
    content = ((choices[0].get("message") or {}).get("content") if choices else None) or ""
    usage = body.get("usage") or {}
    return BatchOutcome(
        custom_id=custom_id,
        success=bool(content),
        content=content or None,
        error=None if content else "Empty completion",
        input_tokens=usage.get("prompt_tokens"),
        output_tokens=usage.get("completion_tokens"),
    )


def parse_results(text: str) -> list[BatchOutcome]:
    """Parse newline-delimited output or error file records."""
    outcomes = []
    for line in text.splitlines():
        if not line.strip():
            continue
        try:
            record = json.loads(line)
        except json.JSONDecodeError:
            logger.warning("Skipping malformed result line: %.80s", line)
            continue
        outcomes.append(_parse_line(record))
    return outcomes


class OpenAIBatchProvider:
    """Batch provider using the OpenAI Batch API (JSONL file in, JSONL files out)."""

    def __init__(self, base_url: str, api_key: str, client: AsyncOpenAI | None = None) -> None:
        self._client = client or AsyncOpenAI(base_url=base_url, api_key=api_key)

    async def submit_batch(self, requests: list[BatchRequest]) -> str:
        """Upload requests and start a batch; returns the batch id."""
        try:
            uploaded = await self._client.files.create(
                file=("batch.jsonl", encode_requests(requests)),
                purpose="batch",
            )
            batch = await self._client.batches.create(
                input_file_id=uploaded.id,
                endpoint=CHAT_COMPLETIONS,
                completion_window="24h",
            )
        except openai.OpenAIError as e:
            raise _translate(e, "Batch submission") from e
        logger.info("Submitted batch %s with %d requests", batch.id, len(requests))
        return batch.id

    async def get_batch_status(self, handle: str) -> BatchStatus:
        try:
            batch = await self._client.batches.retrieve(handle)
        except openai.OpenAIError as e:
            raise _translate(e, f"Status of batch {handle}") from e

        if batch.status in _FAILED:
            state = BatchState.FAILED
        elif batch.status in _ENDED:
            state = BatchState.ENDED
        else:
            state = BatchState.IN_PROGRESS
        counts = batch.request_counts
        errors = getattr(batch, "errors", None)
        messages = [e.message for e in (errors.data or [])] if errors and errors.data else []
        return BatchStatus(
            state=state,
            total=counts.total if counts else 0,
            completed=counts.completed if counts else 0,
            failed=counts.failed if counts else 0,
            result_files=tuple(f for f in (batch.output_file_id, batch.error_file_id) if f),
            error="; ".join(m for m in messages if m) or None,
        )

    async def fetch_results(self, result_files: tuple[str, ...]) -> list[BatchOutcome]:
        outcomes: list[BatchOutcome] = []
        for file_id in result_files:
            try:
                content = await self._client.files.content(file_id)
            except openai.OpenAIError as e:
                raise _translate(e, f"Fetching results file {file_id}") from e
            outcomes.extend(parse_results(content.text))
        return outcomes
