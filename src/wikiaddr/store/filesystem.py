"""Directory-backed wiki store.

Layout under the store root:

    data/<Web>/<SubWeb>/                   a web
    data/<Web>/<SubWeb>/<Topic>.txt        latest revision of a topic
    data/<Web>/<SubWeb>/<Topic>,pfv/<n>    earlier revision n
    pub/<Web>/<SubWeb>/<Topic>/<file>      attachment
    working/work_areas/<name>/             scratch space for extensions

Implements the lookups used by ExistenceValidator, plus the write side
used to build fixtures: ``create_web``, ``save_topic``,
``save_attachment`` and ``work_area``.
"""

import logging
import shutil
from pathlib import Path
from typing import BinaryIO, Mapping, Optional, Sequence

from ..addressing.types import SEGMENT_RE

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Error writing to the store."""

    pass


def _check_names(*names: str) -> None:
    for name in names:
        if not SEGMENT_RE.match(name):
            raise StoreError(f"Invalid web or topic name: {name!r}")


def _format_meta(meta: Mapping[str, Sequence[Mapping[str, str]]]) -> str:
    """Render records as ``%META:TYPE{key="value" ...}%`` lines."""
    lines = []
    for record_type, members in meta.items():
        for member in members:
            attrs = " ".join(f'{key}="{value}"' for key, value in member.items())
            lines.append(f"%META:{record_type}{{{attrs}}}%")
    return "\n".join(lines)


class FileStore:
    """Wiki store on the local filesystem."""

    def __init__(self, root: Path | str):
        self.root = Path(root)
        self.data_dir = self.root / "data"
        self.pub_dir = self.root / "pub"
        self.work_dir = self.root / "working" / "work_areas"

    def _web_dir(self, webs: Sequence[str]) -> Path:
        if not webs:
            raise StoreError("Web path cannot be empty")
        _check_names(*webs)
        return self.data_dir.joinpath(*webs)

    def _topic_file(self, webs: Sequence[str], topic: str) -> Path:
        _check_names(topic)
        return self._web_dir(webs) / f"{topic}.txt"

    def _history_dir(self, webs: Sequence[str], topic: str) -> Path:
        return self._web_dir(webs) / f"{topic},pfv"

    def _attachment_dir(self, webs: Sequence[str], topic: str) -> Path:
        _check_names(*webs, topic)
        return self.pub_dir.joinpath(*webs, topic)

    # Lookups

    def web_exists(self, webs: Sequence[str]) -> bool:
        return self._web_dir(webs).is_dir()

    def topic_exists(self, webs: Sequence[str], topic: str) -> bool:
        return self._topic_file(webs, topic).is_file()

    def latest_revision(self, webs: Sequence[str], topic: str) -> int:
        """Revision number of the topic's current text (0 if absent)."""
        if not self.topic_exists(webs, topic):
            return 0
        history = self._history_dir(webs, topic)
        if not history.is_dir():
            return 1
        return len([p for p in history.iterdir() if p.name.isdigit()]) + 1

    def revision_exists(self, webs: Sequence[str], topic: str, rev: int) -> bool:
        return 1 <= rev <= self.latest_revision(webs, topic)

    def attachment_exists(
        self, webs: Sequence[str], topic: str, filename: str
    ) -> bool:
        if "/" in filename:
            return False
        return (self._attachment_dir(webs, topic) / filename).is_file()

    # Writes

    def create_web(self, webs: Sequence[str]) -> Path:
        """Create a web and any missing parent webs."""
        path = self._web_dir(webs)
        path.mkdir(parents=True, exist_ok=True)
        logger.debug("Created web %s", "/".join(webs))
        return path

    def save_topic(
        self,
        webs: Sequence[str],
        topic: str,
        text: str,
        meta: Optional[Mapping[str, Sequence[Mapping[str, str]]]] = None,
        force_new_revision: bool = True,
    ) -> int:
        """Write topic text, keeping the previous text as history.

        Returns:
            The revision number of the saved text
        """
        if not self.web_exists(webs):
            raise StoreError(f"Web does not exist: {'/'.join(webs)}")
        path = self._topic_file(webs, topic)
        rev = self.latest_revision(webs, topic)
        if rev and force_new_revision:
            history = self._history_dir(webs, topic)
            history.mkdir(exist_ok=True)
            shutil.copyfile(path, history / str(rev))
            rev += 1
        elif not rev:
            rev = 1

        body = text
        if meta:
            body = text.rstrip("\n") + "\n" + _format_meta(meta) + "\n"
        path.write_text(body, encoding="utf-8")
        logger.debug("Saved %s.%s rev %d", "/".join(webs), topic, rev)
        return rev

    def save_attachment(
        self,
        webs: Sequence[str],
        topic: str,
        filename: str,
        stream: Optional[BinaryIO] = None,
        data: bytes = b"",
    ) -> Path:
        """Attach a file to an existing topic."""
        if not self.topic_exists(webs, topic):
            raise StoreError(f"Topic does not exist: {'/'.join(webs)}.{topic}")
        if not filename or "/" in filename:
            raise StoreError(f"Invalid attachment name: {filename!r}")
        directory = self._attachment_dir(webs, topic)
        directory.mkdir(parents=True, exist_ok=True)
        target = directory / filename
        target.write_bytes(stream.read() if stream is not None else data)
        return target

    def work_area(self, name: str) -> Path:
        """Return (creating if needed) a named scratch directory."""
        _check_names(name)
        path = self.work_dir / name
        path.mkdir(parents=True, exist_ok=True)
        return path


__all__ = ["FileStore", "StoreError"]
