"""
Codecs: bytes <-> canonical tree for the three on-disk encodings.

The canonical tree is plain Python data: dict (insertion ordered), list, str,
int, float, bool and None. JSON and YAML map onto it directly. XML needs two
extra rules to stay lossless:

* a list is written as repeated sibling elements, and the sole member of a
  one-element list carries ``seq="true"``;
* non-string scalars, empty containers and lists nested directly in lists
  carry a ``type`` attribute (int, float, bool, null, dict, list).

Attributes only ever hold this metadata; data always lives in element content.
Unannotated XML (hand-written files) still loads: scalars come back as
strings and every position the schema declares a sequence comes back as a
list.
"""
from __future__ import annotations

import json
import re
import xml.etree.ElementTree as ET
from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from ..errors import ParseError, SerializationError, UnsupportedFormatError
from .schema import EMPTY_SCHEMA, SequenceSchema

DEFAULT_ROOT_TAG = "database"

_XML_NAME = re.compile(r"^[^\W\d][\w.\-]*$")
# Characters outside the XML 1.0 Char production; no parser accepts them.
_XML_INVALID_CHARS = re.compile("[^\t\n\r\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")


class Encoding(str, Enum):
    JSON = "json"
    YAML = "yaml"
    XML = "xml"

    @classmethod
    def parse(cls, tag: Union["Encoding", str]) -> "Encoding":
        if isinstance(tag, cls):
            return tag
        try:
            return cls(str(tag).strip().lower())
        except ValueError:
            raise UnsupportedFormatError(f"Unsupported format: {tag!r}") from None

    @classmethod
    def from_path(cls, path) -> "Encoding":
        ext = Path(path).suffix.lower()
        try:
            return _EXTENSIONS[ext]
        except KeyError:
            raise UnsupportedFormatError(f"Unsupported file format: {ext or str(path)!r}") from None


_EXTENSIONS = {
    ".json": Encoding.JSON,
    ".yml": Encoding.YAML,
    ".yaml": Encoding.YAML,
    ".xml": Encoding.XML,
}


def _text(data: Union[bytes, str], label: str) -> str:
    if isinstance(data, str):
        return data
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ParseError(f"{label} document is not valid UTF-8: {e}") from e


class Codec(ABC):
    encoding: Encoding

    @abstractmethod
    def decode(self, data: bytes) -> Any:
        ...

    @abstractmethod
    def encode(self, tree: Any) -> bytes:
        ...


class JsonCodec(Codec):
    encoding = Encoding.JSON

    def decode(self, data: bytes) -> Any:
        try:
            return json.loads(_text(data, "JSON"))
        except json.JSONDecodeError as e:
            raise ParseError(f"Invalid JSON: {e}") from e

    def encode(self, tree: Any) -> bytes:
        try:
            text = json.dumps(tree, indent=2, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise SerializationError(f"Cannot encode document as JSON: {e}") from e
        return (text + "\n").encode("utf-8")


class YamlCodec(Codec):
    encoding = Encoding.YAML

    def decode(self, data: bytes) -> Any:
        try:
            return yaml.safe_load(_text(data, "YAML"))
        except yaml.YAMLError as e:
            raise ParseError(f"Invalid YAML: {e}") from e

    def encode(self, tree: Any) -> bytes:
        try:
            text = yaml.safe_dump(
                tree,
                sort_keys=False,
                allow_unicode=True,
                default_flow_style=False,
            )
        except yaml.YAMLError as e:
            raise SerializationError(f"Cannot encode document as YAML: {e}") from e
        return text.encode("utf-8")


class XmlCodec(Codec):
    encoding = Encoding.XML

    def __init__(self, schema: Optional[SequenceSchema] = None, root_tag: str = DEFAULT_ROOT_TAG):
        self.schema = schema or EMPTY_SCHEMA
        self.root_tag = root_tag

    # -----------------------------
    # decode
    # -----------------------------
    def decode(self, data: bytes) -> Any:
        try:
            root = ET.fromstring(data)
        except ET.ParseError as e:
            raise ParseError(f"Invalid XML: {e}") from e
        return self._read_value(root, ())

    def _read_value(self, el: ET.Element, path: tuple) -> Any:
        kind = el.get("type")
        if kind == "list":
            return [self._read_value(child, path) for child in el]
        if len(el) or kind == "dict":
            return self._read_children(el, path)

        text = el.text or ""
        if kind == "null":
            return None
        if kind == "bool":
            flag = text.strip().lower()
            if flag not in ("true", "false"):
                raise ParseError(f"Invalid boolean in <{el.tag}>: {text!r}")
            return flag == "true"
        try:
            if kind == "int":
                return int(text)
            if kind == "float":
                return float(text)
        except ValueError as e:
            raise ParseError(f"Invalid {kind} in <{el.tag}>: {text!r}") from e
        return text

    def _read_children(self, el: ET.Element, path: tuple) -> Dict[str, Any]:
        groups: Dict[str, List[ET.Element]] = {}
        for child in el:
            groups.setdefault(child.tag, []).append(child)

        out: Dict[str, Any] = {}
        for tag, members in groups.items():
            child_path = path + (tag,)
            values = [self._read_value(m, child_path) for m in members]
            first = members[0]
            if len(members) > 1 or first.get("seq") == "true":
                out[tag] = values
            elif self.schema.is_sequence(child_path) and first.get("type") != "list":
                out[tag] = [] if _is_blank(first) else values
            else:
                out[tag] = values[0]
        return out

    # -----------------------------
    # encode
    # -----------------------------
    def encode(self, tree: Any) -> bytes:
        root = ET.Element(self.root_tag)
        self._write_value(root, tree)
        ET.indent(root)
        data = ET.tostring(root, encoding="utf-8", xml_declaration=True)
        # ElementTree leaves \r in text raw and the parser would fold it into \n.
        return data.replace(b"\r", b"&#13;") + b"\n"

    def _write_member(self, parent: ET.Element, key: Any, value: Any) -> None:
        tag = _element_name(key)
        if isinstance(value, list) and value:
            child = None
            for item in value:
                child = ET.SubElement(parent, tag)
                self._write_value(child, item)
            if len(value) == 1:
                child.set("seq", "true")
        else:
            self._write_value(ET.SubElement(parent, tag), value)

    def _write_value(self, el: ET.Element, value: Any) -> None:
        if isinstance(value, dict):
            if not value:
                el.set("type", "dict")
            for key, item in value.items():
                self._write_member(el, key, item)
        elif isinstance(value, list):
            el.set("type", "list")
            for item in value:
                self._write_value(ET.SubElement(el, "item"), item)
        elif value is None:
            el.set("type", "null")
        elif isinstance(value, bool):
            el.set("type", "bool")
            el.text = "true" if value else "false"
        elif isinstance(value, int):
            el.set("type", "int")
            el.text = str(value)
        elif isinstance(value, float):
            el.set("type", "float")
            el.text = repr(value)
        elif isinstance(value, str):
            bad = _XML_INVALID_CHARS.search(value)
            if bad:
                raise SerializationError(
                    f"Character {bad.group()!r} in <{el.tag}> cannot be stored in XML"
                )
            el.text = value
        else:
            raise SerializationError(f"Cannot encode {type(value).__name__} value in <{el.tag}> as XML")


def _is_blank(el: ET.Element) -> bool:
    """Unannotated empty element, e.g. a hand-written ``<comments/>``."""
    return not len(el) and el.get("type") is None and not (el.text or "").strip()


def _element_name(key: Any) -> str:
    if not isinstance(key, str) or not _XML_NAME.match(key):
        raise SerializationError(f"Key {key!r} is not a valid XML element name")
    return key


def codec_for(
    encoding: Union[Encoding, str],
    schema: Optional[SequenceSchema] = None,
    root_tag: str = DEFAULT_ROOT_TAG,
) -> Codec:
    encoding = Encoding.parse(encoding)
    if encoding is Encoding.XML:
        return XmlCodec(schema=schema, root_tag=root_tag)
    if encoding is Encoding.YAML:
        return YamlCodec()
    return JsonCodec()


def decode(data: bytes, encoding: Union[Encoding, str], schema: Optional[SequenceSchema] = None) -> Any:
    return codec_for(encoding, schema).decode(data)


def encode(tree: Any, encoding: Union[Encoding, str], schema: Optional[SequenceSchema] = None) -> bytes:
    return codec_for(encoding, schema).encode(tree)
