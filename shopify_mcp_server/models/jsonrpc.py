"""Pydantic models for JSON-RPC 2.0 messages."""

from typing import Any, Dict, Optional, Union
from pydantic import BaseModel, ConfigDict, StrictInt, StrictStr

RequestId = Union[StrictStr, StrictInt, None]

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


class RpcRequest(BaseModel):
    """An inbound JSON-RPC request or notification."""
    jsonrpc: str = "2.0"
    method: StrictStr
    id: RequestId = None
    params: Optional[Dict[str, Any]] = None

    model_config = ConfigDict(extra="ignore")

    @property
    def is_notification(self) -> bool:
        return self.id is None


class RpcError(BaseModel):
    """JSON-RPC error object."""
    code: int
    message: str
    data: Any = None


class RpcResponse(BaseModel):
    """Successful JSON-RPC response."""
    jsonrpc: str = "2.0"
    result: Any
    id: RequestId = None


class RpcErrorResponse(BaseModel):
    """Failed JSON-RPC response."""
    jsonrpc: str = "2.0"
    error: RpcError
    id: RequestId = None


def error_response(id: RequestId, code: int, message: str, data: Any = None) -> Dict[str, Any]:
    """Serialize an error response with ``data`` always present."""
    return RpcErrorResponse(id=id, error=RpcError(code=code, message=message, data=data)).model_dump()


def success_response(id: RequestId, result: Any) -> Dict[str, Any]:
    return RpcResponse(id=id, result=result).model_dump()
