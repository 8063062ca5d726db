"""
Serializable error snapshot.

ErrorDetails is what the formatter produces and what loggers and HTTP
responses consume. Field names are snake_case in Python and camelCase on
the wire (``statusCode``), matching the body shape clients already parse.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic_core import to_jsonable_python


class ErrorDetails(BaseModel):
    """
    Formatted snapshot of an error and (recursively) its causes.

    Optional fields are None when absent and are dropped by to_dict().
    Only the top-level snapshot ever carries a timestamp.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    message: str = Field(..., description="Human-readable error description")
    code: Optional[str] = Field(default=None, description="Machine-readable error code")
    status_code: Optional[int] = Field(
        default=None, alias="statusCode", description="HTTP-style status code"
    )
    stack: Optional[str] = Field(default=None, description="Formatted traceback")
    timestamp: Optional[str] = Field(default=None, description="ISO-8601 UTC timestamp")
    context: Optional[dict[str, Any]] = Field(
        default=None, description="Merged diagnostic context (omitted when empty)"
    )
    cause: Optional["ErrorDetails"] = Field(default=None, description="Snapshot of the wrapped error")
    truncated: Optional[bool] = Field(
        default=None, description="Set on the sentinel that replaces a cyclic or too-deep cause"
    )

    def to_dict(self) -> dict[str, Any]:
        """
        JSON-ready dict with wire aliases and absent fields omitted.

        Context values are opaque: anything pydantic cannot encode is
        rendered with repr() instead of failing the dump.
        """
        return to_jsonable_python(self, by_alias=True, exclude_none=True, fallback=repr)

    def depth(self) -> int:
        """Number of snapshots in this chain, including this one."""
        count = 0
        node: Optional[ErrorDetails] = self
        while node is not None:
            count += 1
            node = node.cause
        return count


ErrorDetails.model_rebuild()
