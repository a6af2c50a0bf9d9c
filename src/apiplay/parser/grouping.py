"""Partition endpoints into ordered tag groups for navigation.

An endpoint is grouped under its **first** tag only; an endpoint tagged
``["a", "b"]`` shows up in group ``a`` and nowhere else. Untagged endpoints
land in the synthetic ``default`` group.
"""

from __future__ import annotations

from apiplay.models import ParsedEndpoint, SpecTag, TagGroup

DEFAULT_TAG = "default"


def group_endpoints_by_tag(
    endpoints: list[ParsedEndpoint],
    declared_tags: list[SpecTag],
) -> list[TagGroup]:
    """Group *endpoints* by first tag, following the document's tag order.

    Declared tags come first, in declaration order, carrying their
    descriptions. Tag names used by endpoints but never declared follow in
    first-encounter order, without a description. Groups with no endpoints
    are omitted.

    Args:
        endpoints: Endpoints in extraction order.
        declared_tags: The document's top-level ``tags`` list.

    Returns:
        The ordered list of :class:`~apiplay.models.TagGroup` values.
    """
    buckets: dict[str, list[ParsedEndpoint]] = {}
    for endpoint in endpoints:
        name = endpoint.tags[0] if endpoint.tags else DEFAULT_TAG
        buckets.setdefault(name, []).append(endpoint)

    groups: list[TagGroup] = []
    for tag in declared_tags:
        matched = buckets.pop(tag.name, None)
        if matched:
            groups.append(TagGroup(tag=tag, endpoints=matched))

    for name, remaining in buckets.items():
        groups.append(TagGroup(tag=SpecTag(name=name), endpoints=remaining))

    return groups
