"""
< Opaque cursor tokens >
1. A token is url-safe base64 of a small JSON document describing the seek position only:
   - offset: {"kind": "offset", "offset": 40}
   - keyset: {"kind": "keyset", "keys": {"created_at": "2024-05-01T10:00:00", "id": 17}}
2. Size and Sort are not part of the token; the caller supplies them when decoding, so a client
   can change the window size between requests but never the ordering.
3. Key values are dumped in JSON mode (datetime → ISO string, UUID → str, ...). KeysetStrategy
   coerces them back to the column types when the next statement is built.
"""

from __future__ import annotations

import binascii
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from cursor_pagination.exceptions import InvalidArgumentError
from cursor_pagination.request import CursorRequest, KeysetCursorRequest, OffsetCursorRequest
from cursor_pagination.sort import Sort
from cursor_pagination.utils import b64_decode, b64_encode


class OffsetToken(BaseModel):
    model_config = ConfigDict(extra='forbid', frozen=True)

    kind: Literal['offset'] = 'offset'
    offset: int = Field(ge=0)


class KeysetToken(BaseModel):
    model_config = ConfigDict(extra='forbid', frozen=True)

    kind: Literal['keyset'] = 'keyset'
    keys: dict[str, Any]


CursorToken = Annotated[OffsetToken | KeysetToken, Field(discriminator='kind')]

_token_adapter: TypeAdapter[OffsetToken | KeysetToken] = TypeAdapter(CursorToken)


def encode_cursor(request: CursorRequest) -> str:
    """Encode the position of `request` (typically `window.next_cursor_request()`)."""
    token: OffsetToken | KeysetToken
    if isinstance(request, OffsetCursorRequest):
        token = OffsetToken(offset=request.offset)
    elif isinstance(request, KeysetCursorRequest):
        token = KeysetToken(keys=dict(request.keys))
    else:
        raise InvalidArgumentError(f'Unsupported cursor request type: {type(request).__name__}')
    return b64_encode(token.model_dump_json().encode('utf-8'))


def decode_token(token: str) -> OffsetToken | KeysetToken:
    try:
        raw = b64_decode(token)
        return _token_adapter.validate_json(raw)
    except (binascii.Error, UnicodeError, ValidationError) as e:
        raise InvalidArgumentError('Malformed cursor token.') from e


def decode_cursor(token: str | None, *, size: int, sort: Sort, keyset: bool = True) -> CursorRequest:
    """
    Rebuild a cursor request from a token.

    A missing/empty token yields the first request; `keyset` picks its strategy. A token always
    decides the strategy itself.
    """
    if not token:
        return KeysetCursorRequest.of_size(size, sort) if keyset else OffsetCursorRequest.of_size(size, sort)

    decoded = decode_token(token)
    if isinstance(decoded, OffsetToken):
        return OffsetCursorRequest.of_size(size, sort).with_offset(decoded.offset)
    return KeysetCursorRequest(size, sort, decoded.keys)
