"""Shared test data: the address range and the fixture store built from it."""

from __future__ import annotations

import itertools
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

from wikiaddr.store import FileStore

TEST_WEB = "TemporaryAddressTestsTestWeb"

RANGE_WEBS: List[List[str]] = [
    [TEST_WEB],
    ["Missing" + TEST_WEB],
    [TEST_WEB, "SubWeb"],
    [TEST_WEB, "MissingSubWeb"],
    ["Missing" + TEST_WEB, "MissingSubWeb"],
    [TEST_WEB, "SubWeb", "SubSubWeb"],
    [TEST_WEB, "SubWeb", "MissingSubSubWeb"],
    [TEST_WEB, "MissingSubWeb", "MissingSubSubWeb"],
    ["Missing" + TEST_WEB, "MissingSubWeb", "MissingSubSubWeb"],
]

RANGE_TOPICS: List[Optional[str]] = [None, "Topic", "MissingTopic"]

RANGE_PARTS: Dict[Optional[str], List[Any]] = {
    None: [None],
    "FILE": [
        "Attachment",
        "Attach.ent",
        "Atta.h.ent",
        "MissingAttachment",
        "MissingAttach.ent",
        "MissingAtta.h.ent",
    ],
    "META": [
        None,
        ["FIELD"],
        ["FIELD", {"name": "Colour"}],
        ["FIELD", {"name": "Colour"}, "value"],
        ["FIELD", {"name": "Colour", "form": "MyForm"}],
        ["FIELD", {"name": "Colour", "form": "MyForm"}, "value"],
    ],
    "text": [None],
}

RANGE_REVS: List[Optional[int]] = [None, 2]

SEPARATORS = ["/", "."]


def _case_id(options: Dict[str, Any]) -> str:
    subpart = options["subpart"]
    if isinstance(subpart, list):
        subpart = json.dumps(subpart, sort_keys=True)
    return "{}{} {} {} {} {} @{}".format(
        options["webseparator"],
        options["topicseparator"],
        "/".join(options["webs"]),
        options["topic"],
        options["part"],
        subpart,
        options["rev"],
    )


def range_cases() -> List[Any]:
    """Every valid field combination of the range, as pytest params.

    Combinations that cannot form an address (a part or revision without
    a topic) are left out.
    """
    cases = []
    for webseparator, topicseparator, webs, topic, part, rev in itertools.product(
        SEPARATORS, SEPARATORS, RANGE_WEBS, RANGE_TOPICS, RANGE_PARTS, RANGE_REVS
    ):
        if topic is None and (part is not None or rev is not None):
            continue
        for subpart in RANGE_PARTS[part]:
            options = {
                "webseparator": webseparator,
                "topicseparator": topicseparator,
                "webs": webs,
                "topic": topic,
                "part": part,
                "subpart": subpart,
                "rev": rev,
            }
            cases.append(pytest.param(options, id=_case_id(options)))
    return cases


@dataclass(frozen=True)
class AddressFixture:
    """Store populated with the range's existing webs, topics and files.

    Built once per test session and shared read-only by every test that
    needs it; nothing is torn down.
    """

    store: FileStore
    test_web: str
    work_area: Path


def build_fixture(root: Path) -> AddressFixture:
    store = FileStore(root)
    work_area = store.work_area("AddressTests")

    for webs in RANGE_WEBS:
        if any(name.startswith("Missing") for name in webs):
            continue
        store.create_web(webs)
        web = "/".join(webs)
        for topic in RANGE_TOPICS:
            if topic is None or topic.startswith("Missing"):
                continue
            for rev in (1, 2):
                store.save_topic(webs, topic, f"This is topic: {web}.{topic} @ {rev}\n")
            for attachment in RANGE_PARTS["FILE"]:
                if attachment.startswith("Missing"):
                    continue
                path = work_area / attachment
                path.write_text(f"This is file: {web}.{topic}/{attachment}")
                with path.open("rb") as fh:
                    store.save_attachment(webs, topic, attachment, stream=fh)

    return AddressFixture(store=store, test_web=TEST_WEB, work_area=work_area)
