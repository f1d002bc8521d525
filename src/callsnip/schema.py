from __future__ import annotations

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel

TypeKind = Literal["primitive", "enum", "object", "function", "other"]


class TypeDTO(BaseModel):
    kind: TypeKind = "other"
    printed: str = ""
    intrinsic: Optional[str] = None
    enum_name: Optional[str] = None
    enum_members: List[str] = []
    is_tuple: bool = False
    anonymous: bool = False
    call_signatures: List[CallSignatureDTO] = []


class ParameterDTO(BaseModel):
    name: str
    type: Optional[TypeDTO] = None
    documentation: str = ""


class CallSignatureDTO(BaseModel):
    text: str = ""
    parameters: List[ParameterDTO] = []
    min_argument_count: int = 0
    return_type: Optional[TypeDTO] = None


class SymbolSnapshotDTO(BaseModel):
    name: str
    kind: str = "function"
    container: str = ""
    modifiers: List[str] = []
    display: str = ""
    documentation: str = ""
    call_signatures: List[CallSignatureDTO] = []


class SnippetOptionsDTO(BaseModel):
    dialect: Optional[str] = None
    numbered_placeholders: Optional[bool] = None
    special_literals: Dict[str, str] = {}


class SnippetRequest(SnippetOptionsDTO):
    label: str
    symbol: SymbolSnapshotDTO


class SnippetResponse(BaseModel):
    snippet: str = ""
    errors: List[str] = []


class CompletionSnippetRequest(SnippetOptionsDTO):
    path: str
    entry: str
    label: Optional[str] = None
    line: Optional[int] = None
    character: int = 0
    parent: Optional[str] = None


class SymbolDetailDTO(BaseModel):
    name: str
    kind: str
    modifiers: List[str] = []
    display: str = ""
    documentation: str = ""


class CompletionSnippetResponse(BaseModel):
    detail: Optional[SymbolDetailDTO] = None
    snippet: Optional[str] = None
    errors: List[str] = []


TypeDTO.model_rebuild()
ParameterDTO.model_rebuild()
CallSignatureDTO.model_rebuild()
SymbolSnapshotDTO.model_rebuild()
SnippetRequest.model_rebuild()
