"""Registry data models — component identifiers and published provider records."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TextIO


@dataclass(frozen=True)
class ComponentName:
    """Class identifier of a provider: owning package plus class name."""

    package: str
    class_name: str

    def __post_init__(self) -> None:
        if not self.package or not self.class_name:
            raise ValueError("ComponentName requires both package and class_name")

    def flatten(self) -> str:
        """Return the unambiguous ``package/class`` form."""
        return f"{self.package}/{self.class_name}"

    def _short_class_name(self) -> str:
        if self.class_name.startswith(self.package + "."):
            return self.class_name[len(self.package):]
        return self.class_name

    def short_string(self) -> str:
        """Return ``package/.Cls`` when the class lives under the package."""
        return f"{self.package}/{self._short_class_name()}"

    @classmethod
    def unflatten(cls, text: str) -> ComponentName:
        """Parse ``package/class``; a leading ``.`` is relative to the package."""
        package, sep, class_name = text.strip().partition("/")
        if not sep or not package or not class_name:
            raise ValueError(f"Malformed component name: {text!r}")
        if class_name.startswith("."):
            class_name = package + class_name
        return cls(package=package, class_name=class_name)

    def __str__(self) -> str:
        return f"ComponentInfo{{{self.flatten()}}}"


@dataclass(eq=False)
class ProviderRecord:
    """A published content provider instance.

    The registry reads only ``uid`` (to pick a scope) and the display
    methods below; records are never compared for equality.
    """

    name: ComponentName
    uid: int
    authority: str = ""  # ';'-separated list
    process_name: str = ""
    exported: bool = False
    multiprocess: bool = False
    init_order: int = 0
    read_permission: str = ""
    write_permission: str = ""

    def __post_init__(self) -> None:
        if not self.process_name:
            self.process_name = self.name.package

    @property
    def authorities(self) -> list[str]:
        return [a.strip() for a in self.authority.split(";") if a.strip()]

    def dump(self, sink: TextIO, prefix: str) -> None:
        """Write the detailed multi-line form of this record to ``sink``."""
        sink.write(f"{prefix}package={self.name.package} process={self.process_name}\n")
        sink.write(f"{prefix}uid={self.uid} provider={self.name.short_string()}\n")
        sink.write(f"{prefix}authority={self.authority}\n")
        if self.exported or self.multiprocess or self.init_order:
            sink.write(
                f"{prefix}multiprocess={str(self.multiprocess).lower()}"
                f" initOrder={self.init_order} exported={str(self.exported).lower()}\n"
            )
        if self.read_permission:
            sink.write(f"{prefix}readPermission={self.read_permission}\n")
        if self.write_permission:
            sink.write(f"{prefix}writePermission={self.write_permission}\n")

    def __str__(self) -> str:
        return f"ContentProviderRecord{{u{self.uid} {self.name.short_string()}}}"
