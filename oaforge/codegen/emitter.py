"""Assembly of the generated module and its output.

The generated declarations are spliced into a module skeleton. The skeleton
binds the runtime (``defaults``, ``runtime``, ``servers``) and may be replaced
by a user supplied file, as long as it keeps those bindings.
"""

import ast
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path

from upath import UPath

from oaforge.codegen.ast_utils import ImportCollector, _all, _const
from oaforge.codegen.servers import ServerSet
from oaforge.exceptions import InvalidTemplateError, OutputError

logger = logging.getLogger(__name__)

__all__ = [
    'DEFAULT_TEMPLATE',
    'CodeEmitter',
    'DeclarationSet',
    'FileEmitter',
    'StringEmitter',
    'assemble_module',
]

DEFAULT_TEMPLATE = '''\
"""Generated API client. Do not edit."""

from __future__ import annotations

from oaforge.runtime import RequestOpts, Runtime, TextResponse
from oaforge.runtime import query as qs

defaults: RequestOpts = {'base_url': '/'}
runtime = Runtime(defaults)
servers = {}
'''


@dataclass
class DeclarationSet:
    """The ordered output of one generation run."""

    aliases: list[ast.stmt] = field(default_factory=list)
    types: list[ast.stmt] = field(default_factory=list)
    functions: list[ast.FunctionDef] = field(default_factory=list)
    servers: ServerSet | None = None
    base_url: str = '/'
    imports: ImportCollector = field(default_factory=ImportCollector)
    exports: list[str] = field(default_factory=list)


def _assigned_name(statement: ast.stmt) -> str | None:
    if isinstance(statement, ast.Assign) and len(statement.targets) == 1:
        target = statement.targets[0]
    elif isinstance(statement, ast.AnnAssign):
        target = statement.target
    else:
        return None
    return target.id if isinstance(target, ast.Name) else None


def _find(body: list[ast.stmt], name: str) -> int:
    for index, statement in enumerate(body):
        if _assigned_name(statement) == name:
            return index
    raise InvalidTemplateError(name)


def _set_base_url(statement: ast.stmt, base_url: str) -> None:
    if not isinstance(statement.value, ast.Dict):
        raise InvalidTemplateError('defaults', 'the value is not a dict display')
    for index, key in enumerate(statement.value.keys):
        if isinstance(key, ast.Constant) and key.value == 'base_url':
            statement.value.values[index] = _const(base_url)
            return
    raise InvalidTemplateError('defaults', "the dict has no 'base_url' entry")


def assemble_module(declarations: DeclarationSet, template: str = DEFAULT_TEMPLATE) -> ast.Module:
    """Splice the declarations into the skeleton.

    Collected imports go after the skeleton's own imports, server helpers
    right before ``servers``; aliases, hoisted types, functions and
    ``__all__`` are appended in that order.

    Raises:
        InvalidTemplateError: The skeleton lacks ``defaults`` (with a
            ``base_url`` entry) or ``servers``.
    """
    module = ast.parse(template)
    body = module.body

    _set_base_url(body[_find(body, 'defaults')], declarations.base_url)
    servers_index = _find(body, 'servers')
    if declarations.servers is not None:
        body[servers_index].value = declarations.servers.mapping
        body[servers_index:servers_index] = declarations.servers.functions

    last_import = max(
        (i for i, s in enumerate(body) if isinstance(s, (ast.Import, ast.ImportFrom))),
        default=-1,
    )
    body[last_import + 1 : last_import + 1] = declarations.imports.to_ast()

    body.extend(declarations.aliases)
    body.extend(declarations.types)
    body.extend(declarations.functions)
    body.append(_all(['defaults', 'servers', *declarations.exports]))
    return ast.fix_missing_locations(module)


def validate_python_syntax(source: str, name: str) -> None:
    try:
        compile(source, name, 'exec')
    except SyntaxError as e:
        raise OutputError(name, cause=e) from e


class CodeEmitter(ABC):
    """Abstract base class for code emitters.

    A CodeEmitter takes the declarations of a run, renders them into module
    source and outputs it in a specific way (files, strings, ...).
    """

    def __init__(self, template: str | None = None, validate_syntax: bool = True):
        self.template = template or DEFAULT_TEMPLATE
        self.validate_syntax = validate_syntax

    def render(self, declarations: DeclarationSet, name: str) -> str:
        source = ast.unparse(assemble_module(declarations, self.template)) + '\n'
        if self.validate_syntax:
            validate_python_syntax(source, name)
        return source

    @abstractmethod
    def emit(self, declarations: DeclarationSet, module_name: str) -> str:
        """Emit the module; returns the written path or the source itself."""


class StringEmitter(CodeEmitter):
    """Emits generated code as strings.

    This emitter is useful for testing or when you need to manipulate
    the generated code before writing it.
    """

    def __init__(self, template: str | None = None, validate_syntax: bool = True):
        super().__init__(template, validate_syntax)
        self._modules: dict[str, str] = {}

    def emit(self, declarations: DeclarationSet, module_name: str = 'api.py') -> str:
        source = self.render(declarations, module_name)
        self._modules[module_name] = source
        return source

    def get_module(self, name: str) -> str | None:
        return self._modules.get(name)


class FileEmitter(CodeEmitter):
    """Emits the generated module to a file in ``output_dir``.

    The output directory may be any location ``universal_pathlib`` supports.
    """

    def __init__(
        self,
        output_dir: str | Path | UPath,
        template: str | None = None,
        validate_syntax: bool = True,
    ):
        super().__init__(template, validate_syntax)
        self.output_dir = UPath(output_dir)
        self._written_files: list[str] = []

    def emit(self, declarations: DeclarationSet, module_name: str = 'api.py') -> str:
        source = self.render(declarations, module_name)
        file_path = self.output_dir / module_name
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            file_path.write_text(source, encoding='utf-8')
        except OSError as e:
            raise OutputError(str(file_path), cause=e) from e
        logger.info(f'Wrote {file_path}')
        self._written_files.append(str(file_path))
        return str(file_path)

    def get_written_files(self) -> list[str]:
        return self._written_files.copy()
