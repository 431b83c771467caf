# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Unit tests for the Python source symbol adapter."""

from pathlib import Path

from recordshape.adapters.python import PythonSymbolAdapter
from recordshape.diagnostics import format_pin_site
from recordshape.engine import derive_record_shape
from recordshape.model import Initializer
from recordshape.symbols import TypeRef


def _write_file(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def _derive_single(project_root: Path):
    adapter = PythonSymbolAdapter.load(project_root)
    declarations = adapter.record_interfaces()
    assert len(declarations) == 1
    return adapter, derive_record_shape(adapter, declarations[0].interface)


def test_ph4_pya_001_protocol_members_and_accessors_become_components(
    tmp_path: Path,
) -> None:
    project_root = tmp_path / "project"
    _write_file(
        project_root / "geo" / "point.py",
        """
from typing import Protocol

from recordshape.markers import ignore_default, record_interface


@record_interface
class Point(Protocol):
    \"\"\"A point.\"\"\"

    x: int
    y: int

    @property
    def label(self) -> str: ...

    def describe(self) -> str:
        return f"{self.x},{self.y}"

    @ignore_default
    def norm(self) -> float:
        return 0.0

    @staticmethod
    def origin() -> "Point": ...

    def __eq__(self, other: object) -> bool: ...
""".strip()
        + "\n",
    )

    adapter, shape = _derive_single(project_root)

    assert adapter.errors == []
    assert adapter.reports == []
    assert shape is not None
    assert shape.interface_name == "geo.point.Point"
    assert shape.package_name == "geo.point"
    assert shape.name == "PointRecord"
    assert shape.component_names() == ["x", "y", "label", "describe"]
    assert [str(component.type) for component in shape.components] == [
        "int",
        "int",
        "str",
        "str",
    ]


def test_ph4_pya_002_diamond_across_modules_resolves_relative_imports(
    tmp_path: Path,
) -> None:
    project_root = tmp_path / "project"
    _write_file(project_root / "src" / "pkg" / "__init__.py", "")
    _write_file(
        project_root / "src" / "pkg" / "base.py",
        "from typing import Protocol\n\n\nclass Named(Protocol):\n    name: str\n",
    )
    _write_file(
        project_root / "src" / "pkg" / "left.py",
        "from typing import Protocol\n\nfrom .base import Named\n\n\n"
        "class Left(Named, Protocol):\n    left: int\n",
    )
    _write_file(
        project_root / "src" / "pkg" / "right.py",
        "import typing\n\nfrom pkg.base import Named\n\n\n"
        "class Right(Named, typing.Protocol):\n    right: int\n",
    )
    _write_file(
        project_root / "src" / "pkg" / "root.py",
        "from typing import Protocol\n\n"
        "from recordshape.markers import record_interface\n\n"
        "from . import left\nfrom .right import Right\n\n\n"
        "@record_interface\nclass Both(left.Left, Right, Protocol):\n    ...\n",
    )

    adapter, shape = _derive_single(project_root)

    assert shape is not None
    assert shape.interface_name == "pkg.root.Both"
    assert shape.component_names() == ["left", "name", "right"]
    assert [c.declared_in.qualified_name for c in shape.components] == [
        "pkg.left.Left",
        "pkg.base.Named",
        "pkg.right.Right",
    ]


def test_ph4_pya_003_class_type_parameters_are_read_from_both_syntaxes(
    tmp_path: Path,
) -> None:
    project_root = tmp_path / "project"
    _write_file(
        project_root / "generic.py",
        """
from typing import Generic, Protocol, TypeVar

T = TypeVar("T")


class Pair[K, V](Protocol):
    first: K
    second: V


class Box(Protocol[T]):
    item: T


class Holder(Generic[T]):
    held: T
""".strip()
        + "\n",
    )

    adapter = PythonSymbolAdapter.load(project_root)

    assert adapter.type_parameters(adapter.lookup("generic.Pair")) == [
        TypeRef(text="K"),
        TypeRef(text="V"),
    ]
    assert adapter.type_parameters(adapter.lookup("generic.Box")) == [TypeRef(text="T")]
    assert adapter.type_parameters(adapter.lookup("generic.Holder")) == [
        TypeRef(text="T")
    ]


def test_ph4_pya_004_violations_are_pinned_to_source_lines(tmp_path: Path) -> None:
    project_root = tmp_path / "project"
    _write_file(
        project_root / "shapes.py",
        """
from typing import Protocol

from recordshape.markers import record_interface


@record_interface
class Shape(Protocol):
    def area(self, scale: float) -> float: ...

    def pick[T](self) -> T: ...

    def reset(self): ...
""".strip()
        + "\n",
    )

    adapter, shape = _derive_single(project_root)

    assert shape is None
    assert [report.message for report in adapter.reports] == [
        "Non-static, non-default methods must take no arguments and must return "
        "a value. Bad method: Shape.area()",
        "Interface methods cannot have type parameters. Bad method: Shape.pick()",
        "Non-static, non-default methods must take no arguments and must return "
        "a value. Bad method: Shape.reset()",
    ]
    assert [format_pin_site(report.pin_site) for report in adapter.reports] == [
        "shapes.py:8",
        "shapes.py:10",
        "shapes.py:12",
    ]


def test_ph4_pya_005_loading_is_best_effort_when_one_file_fails(
    tmp_path: Path,
) -> None:
    project_root = tmp_path / "project"
    _write_file(
        project_root / "ok.py",
        "from typing import Protocol\n\nclass Ok(Protocol):\n    value: int\n",
    )
    _write_file(project_root / "broken.py", "class Broken(:\n    pass\n")

    adapter = PythonSymbolAdapter.load(project_root)

    assert adapter.lookup("ok.Ok") is not None
    assert len(adapter.errors) == 1
    assert adapter.errors[0].file_path == "broken.py"


def test_ph4_pya_006_record_interface_arguments_are_read(tmp_path: Path) -> None:
    project_root = tmp_path / "project"
    _write_file(
        project_root / "model.py",
        """
from typing import Protocol

import recordshape.markers as markers


@markers.record_interface(add_builder=False, package="gen.records")
class User(Protocol):
    name: str
""".strip()
        + "\n",
    )

    adapter = PythonSymbolAdapter.load(project_root)

    declarations = adapter.record_interfaces()
    assert len(declarations) == 1
    assert declarations[0].interface.qualified_name == "model.User"
    assert declarations[0].add_builder is False
    assert declarations[0].package_override == "gen.records"


def test_ph4_pya_007_unresolved_external_base_is_skipped(tmp_path: Path) -> None:
    project_root = tmp_path / "project"
    _write_file(
        project_root / "events.py",
        """
from typing import Protocol

from vendor.events import ExternalEvent


class Event(ExternalEvent, Protocol):
    id: int
""".strip()
        + "\n",
    )

    adapter = PythonSymbolAdapter.load(project_root)
    event = adapter.lookup("events.Event")

    assert adapter.direct_supertypes(event) == []
    assert [method.name for method in adapter.declared_methods(event)] == ["id"]


def test_ph4_pya_008_synthetic_members_are_excluded_and_redefinitions_replace(
    tmp_path: Path,
) -> None:
    project_root = tmp_path / "project"
    _write_file(
        project_root / "account.py",
        """
from abc import abstractmethod
from typing import ClassVar, Protocol, overload


class Account(Protocol):
    KIND: ClassVar[str]

    @property
    def balance(self) -> int: ...

    @balance.setter
    def balance(self, value: int) -> None: ...

    @overload
    def owner(self) -> str: ...

    def owner(self) -> str: ...

    @abstractmethod
    def currency(self) -> str:
        return "EUR"

    def owner(self) -> bytes: ...
""".strip()
        + "\n",
    )

    adapter = PythonSymbolAdapter.load(project_root)
    methods = adapter.declared_methods(adapter.lookup("account.Account"))

    assert [method.name for method in methods] == ["balance", "owner", "currency"]
    assert methods[1].return_type == TypeRef(text="bytes")
    assert methods[2].is_default is False


def test_ph4_pya_009_nested_class_bases_resolve_within_enclosing_class(
    tmp_path: Path,
) -> None:
    project_root = tmp_path / "project"
    _write_file(
        project_root / "api.py",
        """
from typing import Protocol

from recordshape.markers import record_interface


class Api:
    class Base(Protocol):
        id: int

    @record_interface
    class Item(Base, Protocol):
        title: str
""".strip()
        + "\n",
    )

    adapter, shape = _derive_single(project_root)

    assert shape is not None
    assert shape.interface_name == "api.Api.Item"
    assert shape.package_name == "api"
    assert shape.component_names() == ["title", "id"]


def test_ph4_pya_010_initializers_resolve_static_members(tmp_path: Path) -> None:
    project_root = tmp_path / "project"
    _write_file(
        project_root / "server.py",
        """
from typing import Final, Protocol

from recordshape.markers import initializer, record_interface


@record_interface
class Server(Protocol):
    DEFAULT_PORT: Final = 8080

    @property
    @initializer("DEFAULT_PORT")
    def port(self) -> int: ...

    @initializer("default_host")
    def host(self) -> str: ...

    @staticmethod
    def default_host() -> str:
        return "localhost"
""".strip()
        + "\n",
    )

    adapter, shape = _derive_single(project_root)

    assert adapter.reports == []
    assert shape is not None
    assert shape.component_names() == ["port", "host"]
    assert shape.initializers == (
        Initializer(component="port", expression="Server.DEFAULT_PORT"),
        Initializer(component="host", expression="Server.default_host()"),
    )


def test_ph4_pya_011_quoted_class_level_qualifiers_are_fields(tmp_path: Path) -> None:
    project_root = tmp_path / "project"
    _write_file(
        project_root / "limits.py",
        """
from typing import ClassVar, Final, Protocol

from recordshape.markers import initializer, record_interface


@record_interface
class Limits(Protocol):
    KIND: "ClassVar[str]"
    MAX_SIZE: "Final[int]" = 64

    @initializer("MAX_SIZE")
    def size(self) -> int: ...
""".strip()
        + "\n",
    )

    adapter, shape = _derive_single(project_root)
    limits = adapter.lookup("limits.Limits")

    assert [field.name for field in adapter.declared_fields(limits)] == [
        "KIND",
        "MAX_SIZE",
    ]
    assert adapter.declared_fields(limits)[1].type == TypeRef(text="int")
    assert adapter.reports == []
    assert shape is not None
    assert shape.component_names() == ["size"]
    assert shape.initializers == (
        Initializer(component="size", expression="Limits.MAX_SIZE"),
    )


def test_ph4_pya_012_redefined_member_keeps_its_first_position(tmp_path: Path) -> None:
    project_root = tmp_path / "project"
    _write_file(
        project_root / "coords.py",
        """
from typing import Protocol


class Coords(Protocol):
    x: int
    y: int

    def x(self) -> float: ...
""".strip()
        + "\n",
    )

    adapter = PythonSymbolAdapter.load(project_root)
    methods = adapter.declared_methods(adapter.lookup("coords.Coords"))

    assert [method.name for method in methods] == ["x", "y"]
    assert methods[0].return_type == TypeRef(text="float")
