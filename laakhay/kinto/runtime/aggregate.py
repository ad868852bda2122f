"""Classification of batch sub-responses.

Each (request, response) pair lands in exactly one bucket:

- published: 2xx, the response body
- conflicts: 412, the sent data against the server's existing resource
- errors: >= 500, server faults
- skipped: any other status (e.g. 404 when deleting a missing record);
  expected and recoverable, unlike errors

Order within each bucket follows the input order.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from ..core.exceptions import BatchError
from ..models import AggregateResult, Conflict, ErrorEntry, SubResponse, WireRequest


class AggregateClassifier:
    """Partitions batch outcomes into published/conflicts/skipped/errors."""

    @classmethod
    def classify(cls, pairs: Iterable[tuple[WireRequest, SubResponse]]) -> AggregateResult:
        result = AggregateResult()
        for request, response in pairs:
            status = response.status
            if 200 <= status < 300:
                result.published.append(response.body)
            elif status == 412:
                result.conflicts.append(
                    Conflict(local=request.body, remote=_existing(response.body))
                )
            elif status >= 500:
                result.errors.append(
                    ErrorEntry(path=response.path or request.path, sent=request, error=response.body)
                )
            else:
                result.skipped.append(response.body)
        return result

    @classmethod
    def aggregate(
        cls,
        responses: Sequence[SubResponse],
        requests: Sequence[WireRequest],
    ) -> AggregateResult:
        """Pair responses with the requests that produced them and classify.

        Raises:
            BatchError: If the two lists differ in length
        """
        if len(responses) != len(requests):
            raise BatchError("Responses length should match requests one.")
        return cls.classify(zip(requests, responses))


def _existing(body: Any) -> Any:
    if not isinstance(body, dict):
        return None
    details = body.get("details")
    if not isinstance(details, dict):
        return None
    return details.get("existing")
