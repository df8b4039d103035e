"""Core data models shared across designctx components."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

_NODE_FIELDS = {
    "id",
    "type",
    "name",
    "children",
    "fills",
    "strokes",
    "effects",
    "style",
    "layoutMode",
    "constraints",
    "characters",
}


@dataclass
class DocumentNode:
    """A single node of the design tree."""

    id: str
    type: str
    name: str = ""
    children: List["DocumentNode"] = field(default_factory=list)
    fills: List[Dict[str, Any]] = field(default_factory=list)
    strokes: List[Dict[str, Any]] = field(default_factory=list)
    effects: List[Dict[str, Any]] = field(default_factory=list)
    style: Dict[str, Any] = field(default_factory=dict)
    layout_mode: Optional[str] = None
    constraints: Dict[str, Any] = field(default_factory=dict)
    characters: Optional[str] = None
    properties: Dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        """Return a raw attribute that has no dedicated field."""
        return self.properties.get(key, default)

    @property
    def reactions(self) -> List[Dict[str, Any]]:
        """Prototype reactions attached to this node."""
        return _dict_list(self.properties.get("reactions"))

    @property
    def is_interactive(self) -> bool:
        return bool(self.reactions) or bool(self.properties.get("transitionNodeID"))

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "DocumentNode":
        """Build a node tree from a Figma-style mapping without recursion."""
        root = cls._from_attributes(payload)
        stack = [(root, payload)]
        while stack:
            node, raw = stack.pop()
            children = raw.get("children")
            if not isinstance(children, list):
                continue
            for child_raw in children:
                if not isinstance(child_raw, Mapping):
                    continue
                child = cls._from_attributes(child_raw)
                node.children.append(child)
                stack.append((child, child_raw))
        return root

    @classmethod
    def _from_attributes(cls, raw: Mapping[str, Any]) -> "DocumentNode":
        layout_mode = raw.get("layoutMode")
        if not isinstance(layout_mode, str) or layout_mode.upper() == "NONE":
            layout_mode = None
        characters = raw.get("characters")
        return cls(
            id=str(raw.get("id", "")),
            type=str(raw.get("type", "")).upper(),
            name=str(raw.get("name") or ""),
            fills=_dict_list(raw.get("fills")),
            strokes=_dict_list(raw.get("strokes")),
            effects=_dict_list(raw.get("effects")),
            style=dict(raw["style"]) if isinstance(raw.get("style"), Mapping) else {},
            layout_mode=layout_mode,
            constraints=(
                dict(raw["constraints"]) if isinstance(raw.get("constraints"), Mapping) else {}
            ),
            characters=characters if isinstance(characters, str) else None,
            properties={key: value for key, value in raw.items() if key not in _NODE_FIELDS},
        )


@dataclass
class StyleDefinition:
    """A declared, reusable style from the document's style table."""

    key: str
    name: str
    style_type: str
    fills: List[Dict[str, Any]] = field(default_factory=list)
    style: Dict[str, Any] = field(default_factory=dict)
    effects: List[Dict[str, Any]] = field(default_factory=list)
    layout_grids: List[Dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_dict(cls, style_id: str, payload: Mapping[str, Any]) -> "StyleDefinition":
        return cls(
            key=str(payload.get("key") or style_id),
            name=str(payload.get("name") or ""),
            style_type=str(payload.get("styleType") or payload.get("style_type") or "").upper(),
            fills=_dict_list(payload.get("fills")),
            style=dict(payload["style"]) if isinstance(payload.get("style"), Mapping) else {},
            effects=_dict_list(payload.get("effects")),
            layout_grids=_dict_list(payload.get("layoutGrids")),
        )


@dataclass
class FileMetadata:
    """Identity and version information for a design file."""

    id: str
    name: str = "Untitled"
    version: str = "v1"
    last_modified: Optional[str] = None
    thumbnail_url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "version": self.version,
            "last_modified": self.last_modified,
            "thumbnail_url": self.thumbnail_url,
        }


@dataclass
class DesignDocument:
    """A design tree together with its declared styles and file metadata."""

    document: DocumentNode
    styles: Dict[str, StyleDefinition] = field(default_factory=dict)
    metadata: FileMetadata = field(default_factory=lambda: FileMetadata(id="unknown"))

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "DesignDocument":
        """Build a document from a Figma REST style file payload."""
        raw_document = payload.get("document")
        if not isinstance(raw_document, Mapping):
            raise ValueError("Design payload must contain a 'document' mapping")
        document = DocumentNode.from_dict(raw_document)

        styles: Dict[str, StyleDefinition] = {}
        raw_styles = payload.get("styles")
        if isinstance(raw_styles, Mapping):
            for style_id, raw_style in raw_styles.items():
                if isinstance(raw_style, Mapping):
                    styles[str(style_id)] = StyleDefinition.from_dict(str(style_id), raw_style)

        version = payload.get("version")
        metadata = FileMetadata(
            id=str(payload.get("id") or document.id or "unknown"),
            name=str(payload.get("name") or "Untitled"),
            version=str(version) if version not in (None, "") else "v1",
            last_modified=_optional_str(payload.get("lastModified")),
            thumbnail_url=_optional_str(payload.get("thumbnailUrl")),
        )
        return cls(document=document, styles=styles, metadata=metadata)


@dataclass
class ExtractionInfo:
    """Bookkeeping attached to every extracted context."""

    timestamp: str
    confidence: float
    processing_time: Optional[float] = None
    cached: bool = False
    extractor: str = "ContextOrchestrator"
    error: Optional[str] = None
    failed_facets: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "timestamp": self.timestamp,
            "processing_time": self.processing_time,
            "cached": self.cached,
            "extractor": self.extractor,
            "confidence": self.confidence,
        }
        if self.error is not None:
            data["error"] = self.error
        if self.failed_facets:
            data["failed_facets"] = list(self.failed_facets)
        return data

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "ExtractionInfo":
        processing_time = payload.get("processing_time")
        return cls(
            timestamp=str(payload.get("timestamp", "")),
            confidence=float(payload.get("confidence", 0.0)),
            processing_time=(
                float(processing_time) if isinstance(processing_time, (int, float)) else None
            ),
            cached=bool(payload.get("cached", False)),
            extractor=str(payload.get("extractor", "ContextOrchestrator")),
            error=_optional_str(payload.get("error")),
            failed_facets=[str(item) for item in payload.get("failed_facets") or []],
        )


@dataclass
class DesignContext:
    """Unified design and technical context for one design file."""

    file: Dict[str, Any]
    nodes: List[Dict[str, Any]]
    styles: Dict[str, Any]
    components: Dict[str, Any]
    layout: Dict[str, Any]
    prototypes: Dict[str, Any]
    extraction: ExtractionInfo
    semantics: Dict[str, Any] = field(default_factory=dict)
    design_tokens: Dict[str, Any] = field(default_factory=dict)
    accessibility: Dict[str, Any] = field(default_factory=dict)
    technical: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_fallback(self) -> bool:
        return self.extraction.error is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "file": self.file,
            "nodes": self.nodes,
            "styles": self.styles,
            "components": self.components,
            "layout": self.layout,
            "prototypes": self.prototypes,
            "semantics": self.semantics,
            "design_tokens": self.design_tokens,
            "accessibility": self.accessibility,
            "technical": self.technical,
            "extraction": self.extraction.to_dict(),
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "DesignContext":
        extraction = payload.get("extraction")
        return cls(
            file=dict(payload.get("file") or {}),
            nodes=list(payload.get("nodes") or []),
            styles=dict(payload.get("styles") or {}),
            components=dict(payload.get("components") or {}),
            layout=dict(payload.get("layout") or {}),
            prototypes=dict(payload.get("prototypes") or {}),
            semantics=dict(payload.get("semantics") or {}),
            design_tokens=dict(payload.get("design_tokens") or {}),
            accessibility=dict(payload.get("accessibility") or {}),
            technical=dict(payload.get("technical") or {}),
            extraction=ExtractionInfo.from_dict(extraction if isinstance(extraction, Mapping) else {}),
        )


def _dict_list(value: Any) -> List[Dict[str, Any]]:
    if not isinstance(value, list):
        return []
    return [dict(item) for item in value if isinstance(item, Mapping)]


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)
