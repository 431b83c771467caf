# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Python source implementation of the symbol adapter."""

import ast
import logging
from dataclasses import dataclass
from pathlib import Path

from recordshape.diagnostics import format_pin_site
from recordshape.symbols import (
    IGNORE_DEFAULT,
    INITIALIZER,
    VOID,
    Annotation,
    FieldRef,
    InterfaceRef,
    MethodRef,
    Parameter,
    PinSite,
    Report,
    Severity,
    TypeRef,
)

logger = logging.getLogger(__name__)

_TRANSPARENT_BASES: set[str] = {
    "Protocol",
    "Generic",
    "ABC",
    "object",
    "typing.Protocol",
    "typing.Generic",
    "typing_extensions.Protocol",
    "typing_extensions.Generic",
    "abc.ABC",
    "builtins.object",
}
_GENERIC_BASES: set[str] = {
    "Protocol",
    "Generic",
    "typing.Protocol",
    "typing.Generic",
    "typing_extensions.Protocol",
    "typing_extensions.Generic",
}
_STATIC_DECORATORS: set[str] = {"staticmethod", "classmethod"}
_SYNTHETIC_DECORATORS: set[str] = {"overload", "setter", "deleter"}
_FIELD_QUALIFIERS: set[str] = {"ClassVar", "Final"}
_MAX_REEXPORT_DEPTH = 16
_ANY = TypeRef(text="Any")


@dataclass(frozen=True)
class AdapterError:
    """Represent a recoverable load error for one file."""

    file_path: str
    message: str


@dataclass(frozen=True)
class RecordInterfaceDecl:
    """Represent one class marked with ``record_interface``.

    Attributes:
        interface: Marked interface.
        add_builder: ``add_builder`` marker argument.
        package_override: ``package`` marker argument.
    """

    interface: InterfaceRef
    add_builder: bool = True
    package_override: str | None = None


@dataclass(frozen=True)
class _ModuleContext:
    module_name: str
    package: str
    file_path: str
    imports: dict[str, str]


@dataclass(frozen=True)
class _ClassEntry:
    ref: InterfaceRef
    node: ast.ClassDef
    module: _ModuleContext
    scope: str


class PythonSymbolAdapter:
    """Serve ``typing.Protocol`` classes parsed from Python sources as interfaces."""

    def __init__(self, root_path: Path) -> None:
        self._root_path = root_path
        self._modules: dict[str, _ModuleContext] = {}
        self._classes: dict[str, _ClassEntry] = {}
        self._declarations: list[RecordInterfaceDecl] = []
        self.errors: list[AdapterError] = []
        self.reports: list[Report] = []

    @classmethod
    def load(
        cls, root_path: Path, files: list[Path] | None = None
    ) -> "PythonSymbolAdapter":
        """Parse Python files into an adapter.

        Loading is best effort: unreadable or unparsable files are recorded in
        ``errors`` and skipped.

        Args:
            root_path: Project root; module names are derived relative to it.
            files: Files to load. Defaults to every ``*.py`` file under the root.

        Returns:
            Loaded adapter.
        """
        adapter = cls(root_path=root_path)
        selected = files if files is not None else sorted(root_path.rglob("*.py"))
        for file_path in selected:
            adapter._load_file(file_path)
        logger.info(
            f"Python sources loaded (path={root_path} files={len(selected)} "
            f"classes={len(adapter._classes)} errors={len(adapter.errors)})"
        )
        return adapter

    def record_interfaces(self) -> list[RecordInterfaceDecl]:
        """Return classes marked with ``record_interface`` in load order."""
        return list(self._declarations)

    def lookup(self, qualified_name: str) -> InterfaceRef | None:
        entry = self._classes.get(qualified_name)
        return entry.ref if entry else None

    def direct_supertypes(self, iface: InterfaceRef) -> list[InterfaceRef]:
        entry = self._classes[iface.qualified_name]
        supertypes: list[InterfaceRef] = []
        for base in entry.node.bases:
            target = base.value if isinstance(base, ast.Subscript) else base
            dotted = _dotted_name(target)
            if dotted is None:
                logger.warning(
                    f"Unsupported base expression skipped (interface={iface.qualified_name} "
                    f"base={ast.unparse(base)})"
                )
                continue
            resolved = self._resolve(dotted=dotted, entry=entry)
            if resolved in _TRANSPARENT_BASES:
                continue
            found = self._classes.get(resolved)
            if found is None:
                logger.warning(
                    f"Unresolved base skipped (interface={iface.qualified_name} base={dotted})"
                )
                continue
            supertypes.append(found.ref)
        return supertypes

    def declared_methods(self, iface: InterfaceRef) -> list[MethodRef]:
        entry = self._classes[iface.qualified_name]
        methods: dict[str, MethodRef] = {}
        for node in entry.node.body:
            method: MethodRef | None = None
            if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
                method = self._method_from_function(node=node, entry=entry)
            elif isinstance(node, ast.AnnAssign) and isinstance(node.target, ast.Name):
                method = self._method_from_member(node=node, entry=entry)
            if method is None:
                continue
            # a redefinition rebinds the name in place, as at runtime
            methods[method.name] = method
        return list(methods.values())

    def declared_fields(self, iface: InterfaceRef) -> list[FieldRef]:
        entry = self._classes[iface.qualified_name]
        fields: list[FieldRef] = []
        for node in entry.node.body:
            if not (isinstance(node, ast.AnnAssign) and isinstance(node.target, ast.Name)):
                continue
            qualifier = self._qualifier(annotation=node.annotation, entry=entry)
            if qualifier is None:
                continue
            fields.append(
                FieldRef(
                    name=node.target.id,
                    type=_qualified_member_type(node),
                    is_static=True,
                    is_final=qualifier == "Final",
                    file_path=entry.module.file_path,
                    line=node.lineno,
                )
            )
        return fields

    def qualified_name(self, iface: InterfaceRef) -> str:
        return iface.qualified_name

    def type_parameters(self, iface: InterfaceRef) -> list[TypeRef]:
        entry = self._classes[iface.qualified_name]
        declared = getattr(entry.node, "type_params", None)
        if declared:
            return [TypeRef(text=ast.unparse(param)) for param in declared]
        for base in entry.node.bases:
            if not isinstance(base, ast.Subscript):
                continue
            dotted = _dotted_name(base.value)
            if dotted is None or self._resolve(dotted, entry) not in _GENERIC_BASES:
                continue
            args = base.slice.elts if isinstance(base.slice, ast.Tuple) else [base.slice]
            return [TypeRef(text=ast.unparse(arg)) for arg in args]
        return []

    def has_annotation(self, method: MethodRef, kind: str) -> bool:
        return any(annotation.kind == kind for annotation in method.annotations)

    def annotation_value(self, method: MethodRef, kind: str) -> str | None:
        for annotation in method.annotations:
            if annotation.kind == kind:
                return annotation.value
        return None

    def report(self, severity: Severity, message: str, pin_site: PinSite) -> None:
        logger.warning(
            f"Derivation diagnostic (severity={severity} "
            f"site={format_pin_site(pin_site)} message={message})"
        )
        self.reports.append(
            Report(severity=severity, message=message, pin_site=pin_site)
        )

    def _load_file(self, file_path: Path) -> None:
        relative_path = file_path.relative_to(self._root_path)
        try:
            source = file_path.read_text(encoding="utf-8")
            tree = ast.parse(source, filename=str(file_path))
        except (OSError, UnicodeDecodeError, SyntaxError, ValueError) as exc:
            logger.warning(
                f"Skipping file due to parse/read failure (file_path={relative_path} error={exc})",
            )
            self.errors.append(
                AdapterError(file_path=relative_path.as_posix(), message=str(exc))
            )
            return

        module_name, is_package = _module_name(relative_path)
        package = module_name if is_package else module_name.rpartition(".")[0]
        module = _ModuleContext(
            module_name=module_name,
            package=package,
            file_path=relative_path.as_posix(),
            imports=_collect_imports(tree=tree, package=package),
        )
        self._modules[module_name] = module
        self._index_classes(module=module, body=tree.body, scope=module_name)

    def _index_classes(
        self, module: _ModuleContext, body: list[ast.stmt], scope: str
    ) -> None:
        for node in body:
            if not isinstance(node, ast.ClassDef):
                continue
            qualified_name = _join(scope, node.name)
            entry = _ClassEntry(
                ref=InterfaceRef(
                    qualified_name=qualified_name,
                    simple_name=node.name,
                    package_name=module.module_name,
                    file_path=module.file_path,
                    line=node.lineno,
                ),
                node=node,
                module=module,
                scope=scope,
            )
            self._classes[qualified_name] = entry
            declaration = self._record_interface_decl(entry)
            if declaration is not None:
                self._declarations.append(declaration)
            self._index_classes(module=module, body=node.body, scope=qualified_name)

    def _record_interface_decl(self, entry: _ClassEntry) -> RecordInterfaceDecl | None:
        for decorator in entry.node.decorator_list:
            if self._decorator_name(decorator, entry) != "record_interface":
                continue
            add_builder = True
            package_override: str | None = None
            keywords = decorator.keywords if isinstance(decorator, ast.Call) else []
            for keyword in keywords:
                value = keyword.value
                if (
                    keyword.arg == "add_builder"
                    and isinstance(value, ast.Constant)
                    and isinstance(value.value, bool)
                ):
                    add_builder = value.value
                elif (
                    keyword.arg == "package"
                    and isinstance(value, ast.Constant)
                    and (value.value is None or isinstance(value.value, str))
                ):
                    package_override = value.value
                else:
                    logger.warning(
                        f"Unsupported record_interface argument ignored "
                        f"(interface={entry.ref.qualified_name} argument={ast.unparse(keyword)})"
                    )
            return RecordInterfaceDecl(
                interface=entry.ref,
                add_builder=add_builder,
                package_override=package_override,
            )
        return None

    def _method_from_function(
        self, node: ast.FunctionDef | ast.AsyncFunctionDef, entry: _ClassEntry
    ) -> MethodRef | None:
        if _is_dunder(node.name):
            return None
        names = {self._decorator_name(d, entry) for d in node.decorator_list}
        if names & _SYNTHETIC_DECORATORS:
            return None

        args = node.args
        positional = [*args.posonlyargs, *args.args]
        if "staticmethod" not in names and positional:
            positional = positional[1:]
        parameters = [
            Parameter(name=arg.arg, type=_parameter_type(arg.annotation))
            for arg in [*positional, *args.kwonlyargs]
        ]
        if args.vararg is not None:
            parameters.append(
                Parameter(
                    name=f"*{args.vararg.arg}",
                    type=_parameter_type(args.vararg.annotation),
                )
            )
        if args.kwarg is not None:
            parameters.append(
                Parameter(
                    name=f"**{args.kwarg.arg}",
                    type=_parameter_type(args.kwarg.annotation),
                )
            )

        annotations: list[Annotation] = []
        for decorator in node.decorator_list:
            name = self._decorator_name(decorator, entry)
            if name == "ignore_default":
                annotations.append(Annotation(kind=IGNORE_DEFAULT))
            elif name == "initializer":
                value = _initializer_argument(decorator)
                if value is None:
                    logger.warning(
                        f"Initializer marker without a literal name ignored "
                        f"(interface={entry.ref.qualified_name} method={node.name})"
                    )
                    continue
                annotations.append(Annotation(kind=INITIALIZER, value=value))

        return MethodRef(
            name=node.name,
            declaring_interface=entry.ref.qualified_name,
            is_static=bool(names & _STATIC_DECORATORS),
            is_default="abstractmethod" not in names and not _is_stub(node.body),
            parameters=tuple(parameters),
            return_type=_return_type(node.returns),
            type_parameters=tuple(
                TypeRef(text=ast.unparse(param))
                for param in getattr(node, "type_params", [])
            ),
            annotations=tuple(annotations),
            file_path=entry.module.file_path,
            line=node.lineno,
        )

    def _method_from_member(
        self, node: ast.AnnAssign, entry: _ClassEntry
    ) -> MethodRef | None:
        name = node.target.id
        if _is_dunder(name) or self._qualifier(node.annotation, entry) is not None:
            return None
        return MethodRef(
            name=name,
            declaring_interface=entry.ref.qualified_name,
            is_default=node.value is not None,
            return_type=_return_type(node.annotation),
            file_path=entry.module.file_path,
            line=node.lineno,
        )

    def _qualifier(self, annotation: ast.expr, entry: _ClassEntry) -> str | None:
        annotation = _unquote(annotation)
        target = annotation.value if isinstance(annotation, ast.Subscript) else annotation
        dotted = _dotted_name(target)
        if dotted is None:
            return None
        head = self._resolve(dotted, entry).rpartition(".")[2]
        return head if head in _FIELD_QUALIFIERS else None

    def _decorator_name(self, decorator: ast.expr, entry: _ClassEntry) -> str:
        target = decorator.func if isinstance(decorator, ast.Call) else decorator
        dotted = _dotted_name(target)
        if dotted is None:
            return ""
        return self._resolve(dotted, entry).rpartition(".")[2]

    def _resolve(self, dotted: str, entry: _ClassEntry) -> str:
        head, _, rest = dotted.partition(".")
        imported = entry.module.imports.get(head)
        if imported is not None:
            return self._follow_reexport(_join(imported, rest))
        for scope in (entry.scope, entry.module.module_name):
            candidate = _join(scope, dotted)
            if candidate in self._classes:
                return candidate
        return dotted

    def _follow_reexport(self, qualified_name: str) -> str:
        current = qualified_name
        for _ in range(_MAX_REEXPORT_DEPTH):
            if current in self._classes:
                return current
            module_name, _, name = current.rpartition(".")
            module = self._modules.get(module_name)
            if module is None or name not in module.imports:
                return current
            current = module.imports[name]
        return current


def _module_name(relative_path: Path) -> tuple[str, bool]:
    parts = list(relative_path.with_suffix("").parts)
    if len(parts) > 1 and parts[0] == "src":
        parts = parts[1:]
    is_package = bool(parts) and parts[-1] == "__init__"
    if is_package:
        parts = parts[:-1]
    return ".".join(parts), is_package


def _collect_imports(tree: ast.Module, package: str) -> dict[str, str]:
    imports: dict[str, str] = {}
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                if alias.asname:
                    imports[alias.asname] = alias.name
                else:
                    root_name = alias.name.split(".")[0]
                    imports[root_name] = root_name
        elif isinstance(node, ast.ImportFrom):
            base = _import_base(node=node, package=package)
            for alias in node.names:
                if alias.name == "*":
                    continue
                imports[alias.asname or alias.name] = _join(base, alias.name)
    return imports


def _import_base(node: ast.ImportFrom, package: str) -> str:
    if node.level == 0:
        return node.module or ""
    base = package
    for _ in range(node.level - 1):
        base = base.rpartition(".")[0]
    return _join(base, node.module or "")


def _dotted_name(node: ast.expr) -> str | None:
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        prefix = _dotted_name(node.value)
        return f"{prefix}.{node.attr}" if prefix else None
    return None


def _join(prefix: str, name: str) -> str:
    if not prefix:
        return name
    if not name:
        return prefix
    return f"{prefix}.{name}"


def _is_dunder(name: str) -> bool:
    return name.startswith("__") and name.endswith("__")


def _is_stub(body: list[ast.stmt]) -> bool:
    for statement in body:
        if isinstance(statement, ast.Pass):
            continue
        if isinstance(statement, ast.Expr) and isinstance(statement.value, ast.Constant):
            if statement.value.value is Ellipsis or isinstance(statement.value.value, str):
                continue
        if isinstance(statement, ast.Raise) and statement.exc is not None:
            raised = statement.exc.func if isinstance(statement.exc, ast.Call) else statement.exc
            if _dotted_name(raised) == "NotImplementedError":
                continue
        return False
    return True


def _unquote(annotation: ast.expr) -> ast.expr:
    """Parse a string annotation into its expression; other nodes pass through."""
    if not (isinstance(annotation, ast.Constant) and isinstance(annotation.value, str)):
        return annotation
    try:
        return ast.parse(annotation.value.strip(), mode="eval").body
    except SyntaxError:
        return annotation


def _type_text(annotation: ast.expr) -> str:
    if isinstance(annotation, ast.Constant) and isinstance(annotation.value, str):
        return annotation.value
    return ast.unparse(annotation)


def _return_type(annotation: ast.expr | None) -> TypeRef:
    if annotation is None:
        return VOID
    text = _type_text(annotation)
    if text == "None":
        return VOID
    return TypeRef(text=text)


def _parameter_type(annotation: ast.expr | None) -> TypeRef:
    if annotation is None:
        return _ANY
    return TypeRef(text=_type_text(annotation))


def _qualified_member_type(node: ast.AnnAssign) -> TypeRef:
    annotation = _unquote(node.annotation)
    if isinstance(annotation, ast.Subscript):
        return TypeRef(text=_type_text(annotation.slice))
    # bare ``Final``: the type follows the literal value
    if isinstance(node.value, ast.Constant) and node.value.value is not None:
        return TypeRef(text=type(node.value.value).__name__)
    return _ANY


def _initializer_argument(decorator: ast.expr) -> str | None:
    if not isinstance(decorator, ast.Call) or not decorator.args:
        return None
    argument = decorator.args[0]
    if isinstance(argument, ast.Constant) and isinstance(argument.value, str):
        return argument.value
    return None
