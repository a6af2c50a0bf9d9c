"""Request modeling -- sample bodies, concrete request descriptors, and snippets.

Sub-modules:

* :mod:`~apiplay.request.samples` -- Example payloads from canonical schemas.
* :mod:`~apiplay.request.builder` -- URL, header and body rules producing a
  :class:`~apiplay.models.RequestDescriptor`.
* :mod:`~apiplay.request.snippets` -- curl / fetch / requests renderings of
  the same descriptor.
"""

from apiplay.request.builder import build_headers, build_request, build_url
from apiplay.request.samples import build_sample_body, default_body_text
from apiplay.request.snippets import emit_snippet

__all__ = [
    "build_url",
    "build_headers",
    "build_request",
    "build_sample_body",
    "default_body_text",
    "emit_snippet",
]
