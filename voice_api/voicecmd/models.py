from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Tuple


class CommandDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    command: str
    aliases: Tuple[str, ...]
    description: str = ""


class CommandCatalog(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    commands: Tuple[CommandDefinition, ...] = ()

    def command_ids(self) -> List[str]:
        return [c.command for c in self.commands]


class MatchResult(BaseModel):
    command: Optional[str] = None
    confidence: float = Field(0.0, ge=0.0, le=1.0)
    matched_phrase: Optional[str] = None
    stage: Optional[str] = None  # "exact" | "overlap" | "phonetic" | "word"
    suggestions: Optional[List[str]] = None


class ParsedCommand(BaseModel):
    action: Optional[str] = None
    parameter: Optional[str] = None
    confidence: float = Field(0.0, ge=0.0, le=1.0)


class ContactMatch(BaseModel):
    name: Optional[str] = None
    confidence: float = Field(0.0, ge=0.0, le=1.0)
