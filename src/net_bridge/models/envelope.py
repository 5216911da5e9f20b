"""
Outbound envelope sent to the IPC peer when an http_post completes.
"""

from typing import Literal
from pydantic import BaseModel


class HttpResponseEnvelope(BaseModel):
    type: Literal["http_response"] = "http_response"
    body: str
