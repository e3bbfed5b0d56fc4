"""Parsed start-tag representation."""

import os
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from stackxml.shared.errors import ErrorKind, XmlError

_SIGNED_INTEGER = re.compile(r"[+-]?[0-9]+\Z")
_UNSIGNED_INTEGER = re.compile(r"[0-9]+\Z")


@dataclass(frozen=True)
class Tag:
    """A start-tag returned by :meth:`XmlReader.parse_tag`.

    Attributes:
        name: Lowercased tag name
        line: 1-based line number of the tag's ``<``
        attributes: Read-only mapping of lowercased attribute names to
            unescaped values
        source_name: Name of the document the tag was read from
    """

    name: str
    line: int
    attributes: Mapping[str, str] = field(default_factory=dict)
    source_name: str = ""

    def __post_init__(self) -> None:
        if self.line < 1:
            raise ValueError("Line number must be >= 1")
        object.__setattr__(
            self, "attributes", MappingProxyType(dict(self.attributes))
        )

    def _error(self, kind: ErrorKind, message: str) -> XmlError:
        return XmlError(kind, message, self.source_name, self.line)

    def has_attribute(self, name: str) -> bool:
        return name in self.attributes

    def get_attribute(self, name: str) -> str:
        """Return an attribute value, raising if it is missing."""
        try:
            return self.attributes[name]
        except KeyError:
            raise self._error(
                ErrorKind.MISSING_ATTRIBUTE,
                f"<{self.name}> is missing attribute {name!r}",
            ) from None

    def get_optional_attribute(
        self, name: str, default: Optional[str] = None
    ) -> Optional[str]:
        return self.attributes.get(name, default)

    def get_attribute_int(self, name: str) -> int:
        """Return an attribute as a signed decimal integer."""
        value = self.get_attribute(name).strip()
        if not _SIGNED_INTEGER.match(value):
            raise self._error(
                ErrorKind.INVALID_ATTRIBUTE_VALUE,
                f"<{self.name}> attribute {name!r} is not an integer: {value!r}",
            )
        return int(value)

    def get_attribute_unsigned(self, name: str) -> int:
        """Return an attribute as an unsigned decimal integer."""
        value = self.get_attribute(name).strip()
        if not _UNSIGNED_INTEGER.match(value):
            raise self._error(
                ErrorKind.INVALID_ATTRIBUTE_VALUE,
                f"<{self.name}> attribute {name!r} is not an unsigned integer: "
                f"{value!r}",
            )
        return int(value)

    def get_attribute_filename(self, name: str) -> str:
        """Return an attribute as a path relative to the document's directory.

        Absolute paths are returned normalized but otherwise unchanged.
        """
        value = self.get_attribute(name)
        if not value:
            raise self._error(
                ErrorKind.INVALID_ATTRIBUTE_VALUE,
                f"<{self.name}> attribute {name!r} is an empty filename",
            )
        dirname = os.path.dirname(self.source_name)
        return os.path.normpath(os.path.join(dirname, value))
