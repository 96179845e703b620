"""
Field Extraction Oracle Module.

Client for the remote language model that turns document text into
extraction records. The service speaks the OpenAI-compatible chat
completions protocol and is authenticated with a bearer credential.

Contract:
    - one attempt per call, no retry
    - an explicit total deadline; the connection is closed on expiry
    - any failure (transport, status, empty or undecodable content) is
      raised as OracleError so the caller can fall back

The model's reply is untrusted. ``decode_records`` unwraps code fences,
accepts a single object or an array of objects, and keeps only the 12
schema fields.
"""

import concurrent.futures
import json
import re
import time
from typing import Any, Dict, List, Optional, Tuple

import requests

from config import get_config
from proforma_extraction.utils.logger import get_logger
from proforma_extraction.utils.exceptions import OracleError, OracleTimeoutError
from proforma_extraction.utils.helpers import truncate
from .extraction_record import ExtractionRecord, ATTRIBUTE_BY_KEY

# Initialize module logger
logger = get_logger(__name__)


SYSTEM_PROMPT = (
    "You are an assistant specialised in extracting structured data from "
    "proforma invoices and other commercial documents. Pay particular "
    "attention to item tables where one item spans several lines. Always "
    "answer with valid JSON and nothing else."
)

TASK_PROMPT = """Analyse the following text extracted from a proforma invoice PDF and extract the fields listed below.

Item table rules:
- "itemNo" is the code in the first column of the item table (e.g. 72692-01, 72692-02).
- "description" is the product name of the item (e.g. "coffee maker 127V"). Do not include serial numbers, G.W./N.W. weights or TOTAL/CTN annotations.
- "quantity", "unitPrice" and "amount" are the quantity, unit price and line total of the item, as written in the document.

Return a JSON array with one object per item in the table, in document order. Document-level fields (piNo, poNo, scNo, beneficiary, nameOfBank, accountNo, swift) must be repeated on every object.

Fields:
- piNo (P/I No.)
- poNo (P/O No.)
- scNo (S/C No.)
- itemNo (item code)
- description (product name)
- quantity
- unitPrice
- amount
- beneficiary (BENEFICIARY)
- nameOfBank (NAME OF THE BANK)
- accountNo (ACCOUNT No.)
- swift (SWIFT)

Use an empty string "" for any field that is not present.

Document text:
{document_text}

Answer with the JSON only:"""

CODE_FENCE = re.compile(r'```(?:json)?\s*(.*?)\s*```', re.DOTALL | re.IGNORECASE)

# Keys some models wrap the record array in
WRAPPER_KEYS = ('items', 'records', 'data', 'lineItems', 'line_items')


class FieldExtractionOracle:
    """
    Single-attempt chat-completions client for invoice field extraction.

    Attributes:
        endpoint: Chat completions URL
        model: Model name sent with each request
        temperature: Sampling temperature
        max_tokens: Completion token limit
        timeout: Total deadline in seconds for one call
        connect_timeout: Socket connect timeout in seconds

    Example:
        >>> oracle = FieldExtractionOracle()
        >>> records = oracle.extract(document_text, api_key="sk-...")
        >>> print(records[0].item_no)
    """

    DEFAULT_ENDPOINT = "https://api.openai.com/v1/chat/completions"
    DEFAULT_MODEL = "gpt-4o"

    def __init__(
        self,
        endpoint: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None
    ) -> None:
        """
        Initialize the oracle client.

        Args:
            endpoint: Chat completions URL. If None, uses config.
            model: Model name. If None, uses config.
            timeout: Total deadline in seconds. If None, uses config.
            session: Optional requests session (shared connection pool).
        """
        self.endpoint = endpoint or get_config("oracle.endpoint", self.DEFAULT_ENDPOINT)
        self.model = model or get_config("oracle.model", self.DEFAULT_MODEL)
        self.temperature = get_config("oracle.temperature", 0.1)
        self.max_tokens = get_config("oracle.max_tokens", 4000)
        self.timeout = float(timeout if timeout is not None else get_config("oracle.timeout_seconds", 60))
        self.connect_timeout = min(
            float(get_config("oracle.connect_timeout_seconds", 10)), self.timeout
        )
        self._session = session or requests.Session()

        logger.debug(f"FieldExtractionOracle initialized (model={self.model}, timeout={self.timeout}s)")

    def build_payload(self, document_text: str) -> Dict[str, Any]:
        """Build the chat completions request body."""
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": TASK_PROMPT.format(document_text=document_text)},
            ],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }

    def extract(self, document_text: str, api_key: str) -> List[ExtractionRecord]:
        """
        Ask the oracle for the records of one document.

        Args:
            document_text: Reconstructed document text.
            api_key: Bearer credential.

        Returns:
            Decoded records, at least one.

        Raises:
            OracleError: On any transport, status or decoding failure.
            OracleTimeoutError: If the deadline passes.
        """
        if not api_key:
            raise OracleError("no credential supplied")

        started = time.monotonic()
        content = self._request_completion(document_text, api_key)
        records = decode_records(content)

        logger.info(
            f"Oracle returned {len(records)} record(s) in {time.monotonic() - started:.2f}s"
        )
        return records

    def _request_completion(self, document_text: str, api_key: str) -> str:
        """Send the request and return the completion text."""
        headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }
        payload = self.build_payload(document_text)
        opened: Dict[str, Any] = {}

        # The deadline covers the whole exchange, body included
        executor = concurrent.futures.ThreadPoolExecutor(max_workers=1)
        try:
            future = executor.submit(self._exchange, payload, headers, opened)
            status_code, body = future.result(timeout=self.timeout)
        except concurrent.futures.TimeoutError as e:
            response = opened.get("response")
            if response is not None:
                response.close()
            logger.warning(f"Oracle call abandoned after {self.timeout}s")
            raise OracleTimeoutError(self.timeout) from e
        finally:
            executor.shutdown(wait=False)

        if not 200 <= status_code < 300:
            raise OracleError(_error_message(status_code, body), status_code=status_code)

        if not body.strip():
            raise OracleError("empty response body", status_code=status_code)

        try:
            data = json.loads(body)
            content = data["choices"][0]["message"]["content"]
        except ValueError as e:
            raise OracleError("response body is not JSON") from e
        except (KeyError, IndexError, TypeError) as e:
            raise OracleError("response has no completion content") from e

        if not isinstance(content, str) or not content.strip():
            raise OracleError("empty completion content")

        logger.debug(f"Oracle completion: {truncate(content)}")
        return content

    def _exchange(
        self,
        payload: Dict[str, Any],
        headers: Dict[str, str],
        opened: Dict[str, Any]
    ) -> Tuple[int, str]:
        """
        POST the payload and read the whole response body.

        Args:
            payload: Request body.
            headers: Request headers.
            opened: Receives the live response under "response" so the
                caller can close it when the deadline passes.

        Returns:
            Tuple of (status code, decoded body).
        """
        try:
            response = self._session.post(
                self.endpoint,
                json=payload,
                headers=headers,
                timeout=(self.connect_timeout, self.timeout),
                stream=True,
            )
        except requests.Timeout as e:
            raise OracleTimeoutError(self.timeout) from e
        except requests.RequestException as e:
            raise OracleError(f"request failed: {e}") from e

        opened["response"] = response
        try:
            return response.status_code, self._read_body(response)
        finally:
            response.close()

    def _read_body(self, response) -> str:
        """Read the streamed body."""
        chunks = []
        try:
            for chunk in response.iter_content(chunk_size=8192):
                chunks.append(chunk)
        except requests.Timeout as e:
            raise OracleTimeoutError(self.timeout) from e
        except requests.RequestException as e:
            raise OracleError(f"failed reading response: {e}") from e

        return b"".join(chunks).decode(response.encoding or "utf-8", errors="replace")


def _error_message(status_code: int, body: str) -> str:
    """Describe a non-2xx response, preferring the API's own error message."""
    try:
        error = json.loads(body).get("error")
    except (ValueError, AttributeError):
        error = None

    if isinstance(error, dict) and error.get("message"):
        return f"HTTP {status_code}: {error['message']}"
    if isinstance(error, str) and error:
        return f"HTTP {status_code}: {error}"
    return f"HTTP {status_code}"


def unwrap_code_fence(content: str) -> str:
    """
    Strip Markdown code-fence markers around a JSON payload.

    Example:
        >>> unwrap_code_fence('```json\\n[{"piNo": "1"}]\\n```')
        '[{"piNo": "1"}]'
    """
    match = CODE_FENCE.search(content)
    return match.group(1).strip() if match else content.strip()


def decode_records(content: str) -> List[ExtractionRecord]:
    """
    Validate and decode the oracle's reply into records.

    Accepts a JSON object, an array of objects, or an object wrapping
    such an array under a single key like "items".

    Raises:
        OracleError: If the content is not JSON, has another shape, or
            holds no records.
    """
    try:
        data = json.loads(unwrap_code_fence(content))
    except ValueError as e:
        raise OracleError("completion is not valid JSON") from e

    items = _record_list(data)

    if not items:
        raise OracleError("completion contains no records")

    for item in items:
        dropped = [
            key for key, value in item.items()
            if key in ATTRIBUTE_BY_KEY and isinstance(value, (list, dict, bool))
        ]
        if dropped:
            logger.debug(f"Dropping non-scalar oracle values for: {', '.join(dropped)}")

    return [ExtractionRecord.from_mapping(item) for item in items]


def _record_list(data: Any) -> List[Dict[str, Any]]:
    if isinstance(data, dict):
        if any(key in ATTRIBUTE_BY_KEY for key in data):
            return [data]
        for key in WRAPPER_KEYS:
            if isinstance(data.get(key), list):
                return _record_list(data[key])
        raise OracleError("JSON object carries none of the record fields")

    if not isinstance(data, list):
        raise OracleError(f"unexpected JSON value of type {type(data).__name__}")

    for item in data:
        if not isinstance(item, dict):
            raise OracleError("records must be JSON objects")
        if not any(key in ATTRIBUTE_BY_KEY for key in item):
            raise OracleError("JSON object carries none of the record fields")

    return data


__all__ = ['FieldExtractionOracle', 'decode_records', 'unwrap_code_fence']
