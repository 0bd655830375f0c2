"""
Version declarations

An UploaderDefinition is the registry of versions for one node of a version
tree. Every declared version owns a child UploaderDefinition with its own
processing pipeline and its own nested registry, so versions nest to any depth.
Definitions are built once at configuration time and shared by reference with
every Uploader instance created from them.
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Tuple, Union

logger = logging.getLogger(__name__)

ProcessorAction = Union[str, Callable[..., Any]]
DefinitionBlock = Callable[["UploaderDefinition"], Any]


@dataclass(frozen=True)
class Processor:
    """One step of a processing pipeline"""
    action: ProcessorAction
    args: Tuple[Any, ...] = ()
    kwargs: Dict[str, Any] = field(default_factory=dict)

    def __call__(self, uploader) -> Any:
        # Method names are looked up on the uploader, callables receive it first
        if callable(self.action):
            return self.action(uploader, *self.args, **self.kwargs)
        return getattr(uploader, self.action)(*self.args, **self.kwargs)

    @property
    def name(self) -> str:
        return self.action if isinstance(self.action, str) else getattr(self.action, "__name__", repr(self.action))


@dataclass(frozen=True)
class ResolvedOptions:
    """Effective options of one uploader instance"""
    enable_processing: bool
    store_dir: str

    @classmethod
    def from_settings(cls, settings) -> "ResolvedOptions":
        return cls(enable_processing=settings.enable_processing, store_dir=settings.store_dir)


@dataclass(frozen=True)
class VersionSpec:
    """A named version declared on a parent definition"""
    name: str
    options: Mapping[str, Any]
    definition: "UploaderDefinition"
    name_path: Tuple[str, ...]

    @property
    def condition(self) -> Any:
        return self.options.get("if")

    def is_active(self, uploader, file) -> bool:
        """
        Evaluate the `if` option against the uploader and the current file

        Args:
            uploader: The parent uploader instance
            file: The file currently being processed by the parent

        Returns:
            True when there is no condition or the condition holds
        """
        condition = self.condition
        if not condition:
            return True
        if callable(condition):
            return bool(condition(uploader, file))
        return bool(getattr(uploader, condition)(file))


class UploaderDefinition:
    """
    Declares the processing pipeline and the versions of an uploader.

    Example:
        photo = UploaderDefinition()
        photo.process("strip_metadata")
        photo.version("thumb", block=lambda thumb: thumb.process("resize", 200, 200))
        photo.version("preview", if_="is_image")
    """

    def __init__(self,
                 enable_processing: Optional[bool] = None,
                 store_dir: Optional[str] = None,
                 name_path: Tuple[str, ...] = ()):
        self.enable_processing = enable_processing
        self.store_dir = store_dir
        self.name_path = tuple(name_path)
        self.processors: List[Processor] = []
        self.versions: Dict[str, VersionSpec] = {}

    def __repr__(self) -> str:
        return f"UploaderDefinition(name_path={self.name_path!r}, versions={list(self.versions)!r})"

    def process(self, action: ProcessorAction, *args: Any, **kwargs: Any) -> Processor:
        """Append a step to this definition's own pipeline"""
        processor = Processor(action, args, dict(kwargs))
        self.processors.append(processor)
        return processor

    def version(self,
                name: str,
                options: Optional[Mapping[str, Any]] = None,
                block: Optional[DefinitionBlock] = None,
                **extra_options: Any) -> VersionSpec:
        """
        Declare a version, or reopen an existing one

        The child definition is created on the first declaration only; later
        declarations of the same name keep the original options but still
        apply their block, so configuration accumulates.

        Args:
            name: Version name, unique within this definition
            options: Version options; `if` names a predicate method on the
                uploader or holds a callable `(uploader, file)`
            block: Called with the child definition to declare its own
                processors and nested versions
            **extra_options: Merged into options; `if_` is accepted for `if`

        Returns:
            The VersionSpec registered under `name`
        """
        name = str(name)
        spec = self.versions.get(name)
        if spec is None:
            merged = dict(options or {})
            merged.update(extra_options)
            if "if_" in merged:
                merged["if"] = merged.pop("if_")

            # Starts with an empty pipeline and an unset processing flag
            child = UploaderDefinition(name_path=self.name_path + (name,))
            spec = VersionSpec(
                name=name,
                options=MappingProxyType(merged),
                definition=child,
                name_path=child.name_path,
            )
            self.versions[name] = spec
            logger.debug(f"Declared version {'_'.join(spec.name_path)}")

        if block is not None:
            block(spec.definition)
        return spec

    def apply_to_all_descendants(self, block: DefinitionBlock) -> None:
        """Apply `block` to every descendant definition, depth-first, pre-order"""
        for spec in list(self.versions.values()):
            block(spec.definition)
            spec.definition.apply_to_all_descendants(block)

    def walk(self) -> Iterator[VersionSpec]:
        """Yield every descendant VersionSpec, depth-first, pre-order"""
        for spec in list(self.versions.values()):
            yield spec
            yield from spec.definition.walk()

    def resolve(self, parent: ResolvedOptions) -> ResolvedOptions:
        """Overrides set on this definition win, anything unset comes from `parent`"""
        return ResolvedOptions(
            enable_processing=parent.enable_processing if self.enable_processing is None else self.enable_processing,
            store_dir=parent.store_dir if self.store_dir is None else self.store_dir,
        )
