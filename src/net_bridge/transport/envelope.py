"""
Envelope construction for bridge -> peer datagrams.
"""

from net_bridge.models.envelope import HttpResponseEnvelope


def build_http_response(body: str) -> bytes:
    """Serialize {"type": "http_response", "body": ...} as compact UTF-8 JSON."""
    return HttpResponseEnvelope(body=body).model_dump_json().encode("utf-8")
