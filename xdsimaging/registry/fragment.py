#    Copyright 2023 SECTRA AB
#
#    Licensed under the Apache License, Version 2.0 (the "License");
#    you may not use this file except in compliance with the License.
#    You may obtain a copy of the License at
#
#        http://www.apache.org/licenses/LICENSE-2.0
#
#    Unless required by applicable law or agreed to in writing, software
#    distributed under the License is distributed on an "AS IS" BASIS,
#    WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#    See the License for the specific language governing permissions and
#    limitations under the License.

"""Tokenizer for registry stored query responses.

Registry responses are usually delivered inside a multipart (MTOM) message and
are not guaranteed to be a well formed XML document as a whole. The classes in
this module therefore work on plain text: a `Fragment` is a piece of response
text and offers named extraction rules (element, slot, value, attribute)
returning `None` when the requested part is missing. Element names are matched
without regard to their namespace prefix."""

import html
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, Iterator, List, Optional, Pattern

_PREFIX = r"(?:[\w.-]+:)?"
_ATTRIBUTE_PATTERN = re.compile(r'([\w:.-]+)\s*=\s*"([^"]*)"')


@lru_cache(maxsize=None)
def _element_pattern(name: str) -> Pattern[str]:
    return re.compile(
        rf"<{_PREFIX}{name}\b([^>]*?)(?:/>|>(.*?)</{_PREFIX}{name}\s*>)",
        re.DOTALL,
    )


@lru_cache(maxsize=None)
def _attribute_pattern(name: str) -> Pattern[str]:
    return re.compile(rf'(?<![\w:.-]){re.escape(name)}\s*=\s*"([^"]*)"')


def _unescape(text: str) -> str:
    return html.unescape(text)


class Fragment:
    """A piece of registry response text."""

    def __init__(self, text: str):
        self._text = text

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._text[:40]!r})"

    def __contains__(self, marker: str) -> bool:
        return marker in self._text

    @property
    def text(self) -> str:
        return self._text

    def after(self, marker: str) -> Optional["Fragment"]:
        """Return the text following the first occurrence of marker."""
        index = self._text.find(marker)
        if index == -1:
            return None
        return Fragment(self._text[index + len(marker) :])

    def token(
        self, marker: str, end: str = '"', raw: bool = False
    ) -> Optional[str]:
        """Return the text between the first occurrence of marker and the
        following end string. The text is unescaped unless raw is set."""
        following = self.after(marker)
        if following is None:
            return None
        end_index = following.text.find(end)
        if end_index == -1:
            return None
        if raw:
            return following.text[:end_index]
        return _unescape(following.text[:end_index])

    def attribute(self, name: str) -> Optional[str]:
        """Return the value of the first attribute with name."""
        match = _attribute_pattern(name).search(self._text)
        if match is None:
            return None
        return _unescape(match.group(1))

    def elements(self, name: str) -> Iterator["Element"]:
        """Iterate over elements with name, in document order."""
        for match in _element_pattern(name).finditer(self._text):
            attributes = {
                key: _unescape(value)
                for key, value in _ATTRIBUTE_PATTERN.findall(match.group(1))
            }
            yield Element(name, attributes, Fragment(match.group(2) or ""))

    def element(self, name: str) -> Optional["Element"]:
        return next(self.elements(name), None)

    def without(self, *names: str) -> "Fragment":
        """Return a copy of the fragment with the elements with names
        removed."""
        text = self._text
        for name in names:
            text = _element_pattern(name).sub("", text)
        return Fragment(text)

    def slot(self, name: str) -> Optional["Element"]:
        """Return the first slot with name. A slot name qualified with an urn,
        e.g. `urn:ihe:iti:xds:2013:referenceIdList`, matches its last part."""
        return next(
            (
                slot
                for slot in self.elements("Slot")
                if slot.name_attribute == name
                or slot.name_attribute.endswith(f":{name}")
            ),
            None,
        )

    def values(self) -> List[str]:
        return [
            _unescape(value.body.text.strip()) for value in self.elements("Value")
        ]

    def first_value(self) -> Optional[str]:
        value = self.element("Value")
        if value is None:
            return None
        return _unescape(value.body.text.strip())

    def localized_string(self) -> Optional[str]:
        localized = self.element("LocalizedString")
        if localized is None:
            return None
        return localized.attributes.get("value")


@dataclass
class Element:
    """Element found in a fragment, with unescaped attributes and its body."""

    name: str
    attributes: Dict[str, str]
    body: Fragment

    @property
    def name_attribute(self) -> str:
        return self.attributes.get("name", "")

    def values(self) -> List[str]:
        return self.body.values()

    def first_value(self) -> Optional[str]:
        return self.body.first_value()
